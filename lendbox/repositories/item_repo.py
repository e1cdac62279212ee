from lendbox.models.item import Item
from lendbox.extensions import db

class ItemRepo:
    @staticmethod
    def get(item_id: int):
        return db.session.get(Item, item_id)

    @staticmethod
    def get_for_update(item_id: int):
        return (
            db.session.query(Item)
            .filter(Item.id == item_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def save(item: Item):
        # flush only: the surrounding unit of work owns the commit
        db.session.add(item)
        db.session.flush()
        return item
