import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .database import SubjektRecord, record_values
from .models import Subjekt, subjekt_from_dict, subjekt_to_dict


def export_subjects(path: Path, subjects: Iterable[Subjekt]) -> int:
    """Write subjects to a JSON file; returns how many were written."""
    items = [subjekt_to_dict(s) for s in subjects]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(items, f, indent=2, ensure_ascii=False)
    return len(items)


def load_exported(path: Path) -> List[Subjekt]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as f:
        content = f.read().strip()
    if not content:
        return []
    return [subjekt_from_dict(item) for item in json.loads(content)]


def save_subject(session, subjekt: Subjekt) -> str:
    """Insert or update one subject. Returns "new", "updated" or "no-change"."""
    values = record_values(subjekt)
    record = session.get(SubjektRecord, subjekt.zkratka)
    if record is None:
        session.add(SubjektRecord(zkratka=subjekt.zkratka, **values))
        return "new"
    if any(getattr(record, k) != v for k, v in values.items()):
        for k, v in values.items():
            setattr(record, k, v)
        return "updated"
    return "no-change"


def save_subjects(session, subjects: Iterable[Subjekt]) -> Dict[str, int]:
    """Upsert subjects in one transaction and count the outcomes."""
    counts = {"new": 0, "updated": 0, "no-change": 0}
    # Registry exports occasionally repeat a Zkratka; the last one wins.
    latest = {s.zkratka: s for s in subjects}
    for subjekt in latest.values():
        counts[save_subject(session, subjekt)] += 1
    session.commit()
    return counts


def set_coa_url(session, zkratka: str, url: Optional[str]) -> bool:
    record = session.get(SubjektRecord, zkratka)
    if record is None:
        return False
    record.coa_url = url
    record.coa_checked_at = datetime.now()
    session.commit()
    return True


def subjects_without_coa(session, limit: Optional[int] = None) -> List[SubjektRecord]:
    """Stored subjects with a municipality in their address that were not looked up yet."""
    query = (
        session.query(SubjektRecord)
        .filter(SubjektRecord.coa_checked_at.is_(None))
        .filter(SubjektRecord.obec.isnot(None))
        .filter(SubjektRecord.obec != "")
        .order_by(SubjektRecord.zkratka)
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()
