"""
Test data factories.

Generate raw source records and normalized records with consistent
defaults.
"""

from typing import Any, Optional

from models.records import NormalizedField, NormalizedRecord


class RawRecordFactory:
    """
    Factory for raw external records (the shape the source returns).

    Usage:
        record = RawRecordFactory.create()
        record = RawRecordFactory.create(image="https://cdn.example.com/a.png")
        records = RawRecordFactory.create_batch(12)
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        id: Optional[str] = None,
        text: Optional[str] = None,
        likes: Optional[int] = None,
        image: Optional[str] = None,
        **extra: Any
    ) -> dict:
        n = cls._next_counter()
        return {
            "id": id or f"post-{n}",
            "text": text or f"Post body {n}",
            "likes": likes if likes is not None else n,
            "image": image or f"https://cdn.example.com/images/{n}.jpg",
            **extra,
        }

    @classmethod
    def create_batch(cls, count: int, **kwargs) -> list[dict]:
        return [cls.create(**kwargs) for _ in range(count)]


class NormalizedRecordFactory:
    """
    Factory for NormalizedRecords matching the sample_mapping fixture.

    Usage:
        record = NormalizedRecordFactory.create(image=None)
    """

    @classmethod
    def create(
        cls,
        source_index: int = 0,
        title: Any = "post-1",
        post_body: Any = "Hello world",
        post_author: Any = 7,
        image: Any = "https://cdn.example.com/images/1.jpg",
    ) -> NormalizedRecord:
        return NormalizedRecord(
            source_index=source_index,
            fields={
                "title": NormalizedField(value=title, type="Symbol"),
                "postBody": NormalizedField(value=post_body, type="RichText"),
                "postAuthor": NormalizedField(value=post_author, type="Symbol"),
                "image": NormalizedField(value=image, type="Link"),
            },
        )
