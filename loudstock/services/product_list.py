"""
Parser de la liste produits Yalidine.

Une ligne par article : "2x Robe Ete (M)" ou "1x Sac".
Les lignes illisibles sont ignorées ; une liste vide est rejetée en amont.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator

from loudstock.services.types import ParsedLineItem

logger = logging.getLogger(__name__)

LINE_RE = re.compile(r"^(\d+)x\s+(.+?)(?:\s+\(([^)]+)\))?$")


def parse_product_list(product_list: str | None) -> Iterator[ParsedLineItem]:
    if not product_list:
        return

    for raw in product_list.splitlines():
        line = raw.strip()
        if not line:
            continue

        m = LINE_RE.match(line)
        if not m:
            logger.debug("Ignored product line: %r", line)
            continue

        quantity = int(m.group(1))
        if quantity <= 0:
            logger.debug("Ignored zero quantity line: %r", line)
            continue

        yield ParsedLineItem(
            quantity=quantity,
            product_name=m.group(2).strip(),
            size=(m.group(3) or "").strip(),
            original_line=line,
        )
