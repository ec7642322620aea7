from .corpus import generate_arithmetic, generate_programs

__all__ = ["generate_arithmetic", "generate_programs"]
