"""PolicyRule ORM model: the casbin rule table read and written by the policy store.

For 'p' rules: v0=role, v1=resource, v2=action, v3=domain, v4=effect.
The v0..v5 layout is what casbin-async-sqlalchemy-adapter expects.
"""

from sqlalchemy import Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.infrastructure.persistence.database import Base


class PolicyRule(Base):
    """One casbin rule. Table: sys_policy_rule. Written only through the enforcer."""

    __tablename__ = "sys_policy_rule"

    # Integer id: the adapter never supplies one.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ptype: Mapped[str | None] = mapped_column(String(255), nullable=True)
    v0: Mapped[str | None] = mapped_column(String(255), nullable=True)
    v1: Mapped[str | None] = mapped_column(String(255), nullable=True)
    v2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    v3: Mapped[str | None] = mapped_column(String(255), nullable=True)
    v4: Mapped[str | None] = mapped_column(String(255), nullable=True)
    v5: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("ptype", "v0", "v1", "v2", "v3", "v4", name="uq_policy_rule"),
        Index("ix_policy_rule_ptype", "ptype"),
        Index("ix_policy_rule_v0_v3", "v0", "v3"),
        Index("ix_policy_rule_v3", "v3"),
    )

    def __str__(self) -> str:
        # Policy line format the adapter feeds to casbin on load: "p, R1, menu, read, ..."
        values = [self.ptype]
        for value in (self.v0, self.v1, self.v2, self.v3, self.v4, self.v5):
            if value is None:
                break
            values.append(value)
        return ", ".join(v for v in values if v is not None)

    def __repr__(self) -> str:
        return f"<PolicyRule {self}>"
