"""리콜 제품 매칭 서비스"""

__version__ = "1.0.0"
