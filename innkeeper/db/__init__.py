from innkeeper.db.session import build_engine, get_db, get_engine, get_session_factory

__all__ = ["build_engine", "get_db", "get_engine", "get_session_factory"]
