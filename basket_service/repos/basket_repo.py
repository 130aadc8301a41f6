# basket_service/repos/basket_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from basket_service.data.models.basket import BasketModel


class BasketRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> BasketModel | None:
        return self.db.execute(
            select(BasketModel)
            .where(BasketModel.user_id == user_id)
            .options(selectinload(BasketModel.items))
        ).scalar_one_or_none()

    def create_basket(self, basket: BasketModel) -> BasketModel:
        self.db.add(basket)
        self.db.commit()
        self.db.refresh(basket)
        return basket

    def update_basket_version(self, basket_id: int, old_version: int, new_data: dict) -> int:
        #pozycje (insert/delete) musza trafic do bazy w tej samej transakcji
        self.db.flush()
        #UPDATE baskets SET ..., version = old + 1 WHERE id = :id AND version = :old
        result = self.db.execute(
            update(BasketModel)
            .where(BasketModel.id == basket_id, BasketModel.version == old_version)
            .values(version=old_version + 1, **new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
