"""Casbin model for domain-scoped role permissions.

Subjects are role codes. A request is allowed when an allow rule matches
the role, resource, action and domain exactly and no deny rule does.
"""

from casbin.model import Model

DOMAIN_RBAC_MODEL = """
[request_definition]
r = sub, obj, act, dom

[policy_definition]
p = sub, obj, act, dom, eft

[policy_effect]
e = some(where (p.eft == allow)) && !some(where (p.eft == deny))

[matchers]
m = r.sub == p.sub && r.dom == p.dom && r.obj == p.obj && r.act == p.act
"""


def build_model() -> Model:
    model = Model()
    model.load_model_from_text(DOMAIN_RBAC_MODEL)
    return model
