"""
ANALYTICS App - Landed Cost per Kg

Average per-kg cost by (HS code, supplier) and the cheapest supplier
for each HS code, computed from the net-weight calculator values
stored on jobs.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from jobs.models import Job

logger = logging.getLogger(__name__)


def parse_cost(value: Optional[str]) -> Optional[float]:
    """Positive finite float from a stored cost string, None otherwise."""
    if value is None:
        return None
    try:
        cost = float(str(value).strip())
    except ValueError:
        return None
    return cost if math.isfinite(cost) and cost > 0 else None


class CostAnalytics:

    @staticmethod
    def _grouped_costs(hs_code: Optional[str] = None,
                       supplier: Optional[str] = None) -> Dict[Tuple[str, str], List[float]]:
        qs = Job.objects.exclude(per_kg_cost='')
        if hs_code:
            qs = qs.filter(cth_no__icontains=hs_code)
        if supplier:
            qs = qs.filter(supplier_exporter__icontains=supplier)

        groups: Dict[Tuple[str, str], List[float]] = {}
        for cth_no, supplier_exporter, raw_cost in qs.values_list('cth_no', 'supplier_exporter', 'per_kg_cost'):
            cost = parse_cost(raw_cost)
            if cost is None:
                continue
            groups.setdefault((cth_no, supplier_exporter), []).append(cost)
        return groups

    @classmethod
    def per_kg_cost(cls) -> List[Dict[str, Any]]:
        """Average per-kg cost per (HS code, supplier), most expensive first."""
        rows = [
            {
                'hs_code': hs,
                'supplier': supplier,
                'avg_per_kg_cost': round(sum(costs) / len(costs), 2),
                'shipment_count': len(costs),
            }
            for (hs, supplier), costs in cls._grouped_costs().items()
        ]
        rows.sort(key=lambda row: row['avg_per_kg_cost'], reverse=True)
        return rows

    @classmethod
    def best_suppliers(cls, hs_code: Optional[str] = None,
                       supplier: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Cheapest supplier for each HS code.

        Args:
            hs_code: Case-insensitive substring filter on the HS code
            supplier: Case-insensitive substring filter on the supplier name

        Returns:
            One row per HS code, sorted by HS code
        """
        best: Dict[str, Dict[str, Any]] = {}
        for (hs, supplier_name), costs in cls._grouped_costs(hs_code, supplier).items():
            average = sum(costs) / len(costs)
            current = best.get(hs)
            if current is None or average < current['_average']:
                best[hs] = {
                    'hs_code': hs,
                    'best_supplier': supplier_name,
                    '_average': average,
                    'shipment_count': len(costs),
                }

        rows = []
        for hs in sorted(best):
            row = best[hs]
            rows.append({
                'hs_code': row['hs_code'],
                'best_supplier': row['best_supplier'],
                'min_avg_per_kg_cost': round(row['_average'], 2),
                'shipment_count': row['shipment_count'],
            })
        return rows
