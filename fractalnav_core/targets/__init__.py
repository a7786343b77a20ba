from .base import DrawTarget
from .headless import HeadlessDrawTarget

__all__ = ["DrawTarget", "HeadlessDrawTarget"]
