# tiffin/data/seed.py
from tiffin.data.database import SessionLocal
from tiffin.data.models.menu import MenuCategoryModel
from tiffin.domain.constants import MENU_CATEGORY_ORDER


def seed(db=None) -> int:
    """Zaklada kategorie menu, tylko jesli tabela jest pusta."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        if db.query(MenuCategoryModel).first():
            return 0
        for name in MENU_CATEGORY_ORDER:
            db.add(MenuCategoryModel(name=name))
        db.commit()
        return len(MENU_CATEGORY_ORDER)
    finally:
        if own_session:
            db.close()
