# marketplace/adapters/outbound/persistence/models/base_model.py

from sqlalchemy.orm import declarative_base

# Parent class of every ORM model, owner of the metadata
Base = declarative_base()
