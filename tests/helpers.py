"""Dataset builders and store doubles shared by the unit tests."""
import csv
from pathlib import Path
from typing import Any, Iterable, Sequence

from openpyxl import Workbook

from catalog_ingest.models.product_record import ProductRecord

CSV_HEADER = [
    "product_id",
    "product_name",
    "category",
    "discounted_price",
    "actual_price",
    "discount_percentage",
    "rating",
    "rating_count",
    "review_title",
    "review_content",
    "img_link",
    "product_link",
]


def review_row(index: int, **overrides: Any) -> dict[str, Any]:
    """One dataset row keyed by source column name."""
    row = {
        "product_id": f"B07JW{index:05d}",
        "product_name": f"USB-C Cable {index}",
        "category": "Computers&Accessories|Accessories&Peripherals|Cables",
        "discounted_price": "₹399",
        "actual_price": "₹1,099",
        "discount_percentage": "64%",
        "rating": "4.2",
        "rating_count": "24,269",
        "review_title": "Satisfied",
        "review_content": "Works as expected",
        "img_link": f"https://m.media-amazon.com/images/I/{index}.jpg",
        "product_link": f"https://www.amazon.in/dp/B07JW{index:05d}",
    }
    row.update(overrides)
    return row


def write_csv(path: Path, rows: Iterable[dict[str, Any]], header: Sequence[str] = CSV_HEADER) -> Path:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(header), extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path


def write_xlsx(
    path: Path,
    rows: Iterable[dict[str, Any]],
    header: Sequence[str] = CSV_HEADER,
    banner: Sequence[Any] = ("amazon", "https://www.amazon.in/"),
) -> Path:
    """Write a workbook shaped like the marketplace export.

    Row 1 is a banner, row 2 the headers, data starts at row 3.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "amazon"
    ws.append(list(banner))
    ws.append(list(header))
    for row in rows:
        ws.append([row.get(column) for column in header])
    wb.save(path)
    return path


def make_record(key: str, name: str | None = None, **fields: Any) -> ProductRecord:
    return ProductRecord(business_key=key, name=name or f"Product {key}", **fields)


class InMemoryProductStore:
    """ProductStore fake.

    Each insert_batch call is one "transaction": a failing call stores
    nothing. Keys already stored are skipped, like ON CONFLICT DO NOTHING.
    """

    def __init__(self, fail_batches: Iterable[int] = ()) -> None:
        self.rows: dict[str, ProductRecord] = {}
        self.fail_batches = set(fail_batches)
        self.batches: list[list[str]] = []

    async def insert_batch(self, records: Sequence[ProductRecord]) -> int:
        batch_index = len(self.batches)
        keys = [record.business_key for record in records]
        self.batches.append(keys)

        if batch_index in self.fail_batches:
            raise RuntimeError("value too long for type character varying(40)")
        if len(set(keys)) != len(keys):
            raise RuntimeError("duplicate key within a single INSERT statement")

        staged = {r.business_key: r for r in records if r.business_key not in self.rows}
        self.rows.update(staged)
        return len(staged)
