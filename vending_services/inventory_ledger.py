"""
vending_services.inventory_ledger -- The machine's shelf rows.

Responsibility:
    Hold the stocked ItemRows, find a row by label, merge restock
    deliveries into the shelves, vend one unit from a row and list the
    shelves for display.

Architecture position:
    Services -- stateful, in-memory. Composes kernel value objects only.

Invariants enforced:
    - UNIQUE_LABEL: lookup() and restock_goods() raise DuplicateLabelError
      as soon as more than one stored row answers to a label.
    - FIXED_LABEL_ITEM: a restock row whose item differs from the item
      already stored under its label is rejected and reported, never merged.
    - Empty rows are removed: vend() drops a row whose count reaches zero.
    - Copies out, copies in: rows handed in by restock are copied, rows
      handed out by list_rows() are copies.

Failure modes:
    - DuplicateLabelError (IntegrityViolation) on corrupt storage. For
      restock_goods the check runs over every incoming label before any
      row is touched, so the raise leaves the ledger unchanged.
    - RowNotStockedError (IntegrityViolation) if vend() is given a row
      the ledger does not hold.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from vending_kernel.domain.values import Item, ItemRow
from vending_kernel.exceptions import DuplicateLabelError, RowNotStockedError
from vending_kernel.logging_config import get_logger

logger = get_logger("services.inventory")


@dataclass(frozen=True)
class RestockRejection:
    """A restock row refused because its label already holds another item."""

    label: str
    existing_item: Item
    offered_item: Item
    offered_count: int

    def __str__(self) -> str:
        return (
            f"Warning: {self.label} already contains {self.existing_item.name}.  "
            f"Can't put in {self.offered_item.name}"
        )


@dataclass(frozen=True)
class RestockReport:
    """
    Outcome of one restock_goods() call.

    Guarantees:
        - every incoming row appears in exactly one of inserted, merged,
          rejected, skipped (by label)
        - skipped holds new labels offered with a zero count; they are
          never stored
        - snapshot is the full inventory after the restock, sorted by label
    """

    inserted: tuple[str, ...]
    merged: tuple[str, ...]
    rejected: tuple[RestockRejection, ...]
    snapshot: tuple[ItemRow, ...]
    skipped: tuple[str, ...] = ()

    @property
    def has_rejections(self) -> bool:
        return bool(self.rejected)


class InventoryLedger:
    """
    In-memory shelf storage keyed by case-insensitive label.

    Rows are held in a plain list so that a corrupt state (two rows under
    one label) stays observable and is reported rather than hidden by a
    dict key collision.
    """

    def __init__(self, rows: Iterable[ItemRow] = ()):
        self._rows: list[ItemRow] = []
        if rows:
            self.restock_goods(rows)

    def __len__(self) -> int:
        return len(self._rows)

    def _matches(self, label: str) -> list[ItemRow]:
        return [row for row in self._rows if row.matches(label)]

    def lookup(self, label: str) -> ItemRow | None:
        """
        Find the row stocked under ``label`` (case-insensitive).

        Returns:
            The stored row, or None when no row matches.

        Raises:
            DuplicateLabelError: If more than one row matches.
        """
        matches = self._matches(label)
        if len(matches) > 1:
            logger.critical("duplicate_label_detected", extra={
                "label": label,
                "match_count": len(matches),
            })
            raise DuplicateLabelError(label, len(matches))
        return matches[0] if matches else None

    def restock_goods(self, rows: Iterable[ItemRow]) -> RestockReport:
        """
        Merge a delivery into the shelves.

        Per incoming row:
            - no row under its label: insert a copy
            - one row with an equal item: add the incoming count
            - one row with a different item: reject, log a warning

        Raises:
            DuplicateLabelError: If any incoming label already answers to
                more than one stored row. Raised before any mutation.
        """
        incoming = [row.copy() for row in rows]

        for row in incoming:
            matches = self._matches(row.label)
            if len(matches) > 1:
                logger.critical("duplicate_label_detected", extra={
                    "label": row.label,
                    "match_count": len(matches),
                })
                raise DuplicateLabelError(row.label, len(matches))

        inserted: list[str] = []
        merged: list[str] = []
        rejected: list[RestockRejection] = []
        skipped: list[str] = []

        for row in incoming:
            existing = self.lookup(row.label)
            if existing is None and row.count <= 0:
                skipped.append(row.label)
            elif existing is None:
                self._rows.append(row)
                inserted.append(row.label)
            elif existing.item == row.item:
                existing.count += row.count
                merged.append(row.label)
            else:
                rejection = RestockRejection(
                    label=row.label,
                    existing_item=existing.item,
                    offered_item=row.item,
                    offered_count=row.count,
                )
                rejected.append(rejection)
                logger.warning("restock_label_conflict", extra={
                    "label": row.label,
                    "existing_item": existing.item.name,
                    "offered_item": row.item.name,
                })

        report = RestockReport(
            inserted=tuple(inserted),
            merged=tuple(merged),
            rejected=tuple(rejected),
            snapshot=self.list_rows(),
            skipped=tuple(skipped),
        )
        logger.info("goods_restocked", extra={
            "inserted": list(report.inserted),
            "merged": list(report.merged),
            "skipped": list(report.skipped),
            "rejected_count": len(report.rejected),
            "row_count": len(self._rows),
        })
        return report

    def vend(self, row: ItemRow) -> Item:
        """
        Dispense one unit from ``row``; remove the row when it empties.

        ``row`` must be the stored row returned by lookup().

        Raises:
            RowNotStockedError: If the ledger does not hold ``row`` or the
                row has no units left.
        """
        if row.count <= 0 or not any(stored is row for stored in self._rows):
            raise RowNotStockedError(row.label)

        row.count -= 1
        if row.count <= 0:
            self._rows = [stored for stored in self._rows if stored is not row]

        logger.info("item_vended", extra={
            "label": row.label,
            "item": row.item.name,
            "price_cents": row.item.price_cents,
            "remaining": row.count,
        })
        return row.item

    def list_rows(self) -> tuple[ItemRow, ...]:
        """All rows sorted by label, as copies."""
        return tuple(row.copy() for row in sorted(self._rows, key=lambda r: r.label))
