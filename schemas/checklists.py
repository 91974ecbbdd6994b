"""
Pydantic schemas for checklists, categories and items
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from schemas.api import reject_null


def _strip_name(v):
    if v is not None:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
    return v


# ============================================================================
# Checklists
# ============================================================================

class ChecklistCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

    @validator("name")
    def clean_name(cls, v):
        return _strip_name(v)


class ChecklistUpdate(BaseModel):
    """Partial update; only fields that are sent are written"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None

    @validator("name", pre=True)
    def name_not_null(cls, v):
        return reject_null(v)

    @validator("name")
    def clean_name(cls, v):
        return _strip_name(v)


class ChecklistRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Categories
# ============================================================================

class CategoryCreate(BaseModel):
    """Body for appending a category to a checklist"""
    name: str = Field(..., min_length=1, max_length=255)

    @validator("name")
    def clean_name(cls, v):
        return _strip_name(v)


class CategoryRead(BaseModel):
    id: str
    checklist_id: str
    name: str
    position: int

    class Config:
        from_attributes = True


# ============================================================================
# Items
# ============================================================================

class ItemCreate(BaseModel):
    """
    Full item payload used for bulk inserts.

    position and is_active are taken verbatim; nothing here renumbers.
    """
    name: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    position: int = 0
    is_active: bool = True


class ItemAddRequest(BaseModel):
    """Body for appending a criterion to a category"""
    name: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None

    @validator("name")
    def clean_name(cls, v):
        return _strip_name(v)


class ItemRead(BaseModel):
    id: str
    category_id: str
    name: str
    description: Optional[str] = None
    position: int
    is_active: bool

    class Config:
        from_attributes = True


# ============================================================================
# Detail view
# ============================================================================

class CategoryWithItems(CategoryRead):
    items: List[ItemRead] = Field(default_factory=list)


class ChecklistDetail(ChecklistRead):
    """A checklist with its categories and items, all in position order"""
    categories: List[CategoryWithItems] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "0b7c4c4e-2f0e-4d55-9a39-7d1f0f0d2a11",
                "name": "QA Template",
                "description": "v1",
                "created_at": "2024-01-15T10:30:00",
                "updated_at": "2024-01-15T10:30:00",
                "categories": [
                    {
                        "id": "5d0e2b9a-0b57-4d8c-9f4c-3c3f3e8b1f20",
                        "checklist_id": "0b7c4c4e-2f0e-4d55-9a39-7d1f0f0d2a11",
                        "name": "Intro",
                        "position": 0,
                        "items": [
                            {
                                "id": "a4c0c2f7-5f6e-4b8e-8a9b-1b2c3d4e5f60",
                                "category_id": "5d0e2b9a-0b57-4d8c-9f4c-3c3f3e8b1f20",
                                "name": "Greeting",
                                "position": 0,
                                "is_active": True
                            }
                        ]
                    }
                ]
            }
        }
