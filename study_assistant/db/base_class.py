from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Classe de base pour tous les modèles SQLAlchemy.
    Ses métadonnées servent à créer le schéma du stockage local.
    """
