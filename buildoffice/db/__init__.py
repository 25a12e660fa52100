"""BuildOffice database layer — SQLAlchemy base, engine registry, sessions and tables."""
