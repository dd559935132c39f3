"""Bundled sample registrations used when no real data source is available."""
import csv
import io
from typing import List

from springlog.models.registration import CommutePreference, Registration, encode_dietary

SEED_CSV = "\n".join([
    "姓名,工号,联系方式,饮食禁忌,活动兴趣,拼车意向,报名时间",
    "张小龙,EMP-1001,13800138000,无,飞盘,有车出车,2026-03-20 10:00:00",
    "雷军,EMP-1002,13912345678,素食,徒步,需拼车,2026-03-20 11:30:00",
    "马化腾,EMP-1003,13700001111,无,露营,自驾,2026-03-20 14:15:00",
    "丁磊,EMP-1004,13611112222,清真,摄影,需拼车,2026-03-21 09:45:00",
    "李彦宏,EMP-1005,13533334444,过敏:海鲜,桌游,有车出车,2026-03-21 16:20:00",
])

_DIETARY_LABELS = {
    "无": "None",
    "素食": "Vegetarian",
    "清真": "Halal",
    "过敏": "Allergy",
}


def _parse_dietary(raw: str) -> str:
    label, _, note = raw.partition(":")
    return encode_dietary(_DIETARY_LABELS.get(label.strip(), "Other"), note)


def load_seed_registrations(seed_csv: str = SEED_CSV) -> List[Registration]:
    """
    Parse the bundled sample rows.

    Returns:
        Registrations with ids "mock-0".."mock-N", in the order given
    """
    reader = csv.reader(io.StringIO(seed_csv))
    next(reader, None)

    registrations = []
    for index, row in enumerate(reader):
        name, employee_id, contact, dietary, activity, carpool, submitted_at = row
        registrations.append(
            Registration(
                id=f"mock-{index}",
                name=name,
                employee_identifier=employee_id,
                contact_info=contact,
                dietary_preference=_parse_dietary(dietary),
                activity_interest=activity,
                commute_preference=CommutePreference.parse(carpool),
                submitted_at=submitted_at,
            )
        )
    return registrations
