from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    # Table name is the lowercased class name: "satellite", "satelliteorbit", ...
    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
