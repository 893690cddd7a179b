"""데이터베이스 모델"""
from sqlalchemy import Column, String, Text, Index
from src.core.database import Base


class RecallProduct(Base):
    """리콜 제품 테이블 (수집 배치가 채우고, 매칭 엔진은 읽기만 함)"""

    __tablename__ = "recall_products"

    recall_sn = Column(String(100), primary_key=True)  # 리콜번호
    product_name = Column(Text, nullable=True)  # 제품명
    business_name = Column(String(500), nullable=True)  # 사업자명
    manufacturer = Column(String(500), nullable=True, index=True)  # 제조사
    model_name = Column(Text, nullable=True)  # 모델명
    publication_date = Column(String(50), nullable=True)  # 리콜 공표시작일
    defect_content = Column(Text, nullable=True)  # 결함내용
    category = Column(String(50), nullable=True)  # 카테고리 태그

    __table_args__ = (
        Index("idx_recall_publication_date", "publication_date"),
    )

    def __repr__(self) -> str:
        return f"<RecallProduct(recall_sn={self.recall_sn}, product={self.product_name})>"
