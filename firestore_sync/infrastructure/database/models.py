"""
Modelos de base de datos (ORM) destino del sync.

Los nombres de atributo coinciden con los campos destino de
`collection_mappings.py`; el upsert asigna por atributo.
"""
from sqlalchemy import Column, String, Integer, DateTime, Float, Text
from sqlalchemy.sql import func

from firestore_sync.infrastructure.database.session import Base


class UserModel(Base):
    """Usuarios sincronizados desde la colección `users`."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=True)
    age = Column(Integer, nullable=True)
    city = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    # JSON serializado por la transformación "serialize"
    tags = Column(Text, nullable=True)
    preferences = Column(Text, nullable=True)
    # "metadata" está reservado por SQLAlchemy en modelos declarativos
    extra_metadata = Column("metadata", Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, name={self.name})>"


class ProductModel(Base):
    """Productos sincronizados desde la colección `products`."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    sku = Column(String(128), nullable=False, unique=True, index=True)
    price = Column(Float, nullable=True)
    category_name = Column(String(255), nullable=True)
    category_id = Column(String(128), nullable=True)
    images = Column(Text, nullable=True)
    specifications = Column(Text, nullable=True)
    variants = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, sku={self.sku}, name={self.name})>"
