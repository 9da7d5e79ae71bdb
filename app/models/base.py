from sqlalchemy import Column, DateTime, Enum, func


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


def value_enum(enum_cls) -> Enum:
    # Store enum values ("pending"), not member names, so migrations and raw SQL agree.
    return Enum(enum_cls, values_callable=lambda members: [member.value for member in members])
