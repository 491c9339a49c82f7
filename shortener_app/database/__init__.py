from .connection import Base, build_engine

__all__ = ["Base", "build_engine"]
