"""Hand-authored stories served when an ingestion cycle yields nothing.

Built fresh on each call so timestamps stay relative to the time of use.
Each record obeys the usual Story invariants (count == references, confidence
derived from count).
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from cybernews.aggregation.stories import Reference, Story, confidence_for
from cybernews.ingestion.dates import utcnow


KREBS = Reference("Krebs on Security", "https://krebsonsecurity.com")
THN = Reference("The Hacker News", "https://thehackernews.com")
BLEEPING = Reference("Bleeping Computer", "https://bleepingcomputer.com")
SECURITYWEEK = Reference("SecurityWeek", "https://securityweek.com")
CSO = Reference("CSO Online", "https://csoonline.com")


# (id, hours ago, category, title, summary, content, references)
_FALLBACK_RECORDS: Sequence[Tuple[str, int, str, str, str, str, Tuple[Reference, ...]]] = (
    (
        "fallback-1",
        2,
        "breach",
        "Major Cybersecurity Breach Affects Multiple Organizations",
        "A large breach spanning several sectors has been disclosed. Investigators link it to a "
        "coordinated campaign against enterprise systems.",
        "Researchers have disclosed a breach that reached organizations in healthcare, finance and "
        "technology. Automated monitoring first flagged the intrusion, and the activity points to a "
        "coordinated campaign against enterprise systems. Customer records, financial data and "
        "proprietary documents were accessed. Affected companies are working with incident "
        "responders to scope the damage. Users should watch their accounts for unusual activity and "
        "rotate passwords where needed.",
        (KREBS, THN, BLEEPING, SECURITYWEEK, CSO),
    ),
    (
        "fallback-2",
        4,
        "ransomware",
        "New Ransomware Variant Targets Critical Infrastructure",
        "A newly identified ransomware strain is hitting critical infrastructure operators and "
        "demanding cryptocurrency payments.",
        "A ransomware strain aimed at power, water and transport operators has been identified. The "
        "malware encrypts operational data and control-system files and demands payment in "
        "cryptocurrency. Several facilities have reported disruptions. The operators behind it abuse "
        "known weaknesses in industrial control and SCADA networks. Infrastructure owners are urged "
        "to patch and to tighten monitoring.",
        (THN, BLEEPING, SECURITYWEEK, CSO),
    ),
    (
        "fallback-3",
        6,
        "vulnerability",
        "Zero-Day Vulnerability Discovered in Popular Software",
        "A critical zero-day in widely deployed software is being exploited in the wild.",
        "A critical zero-day allowing remote code execution has been found in a widely deployed "
        "application. Several versions are affected and exploitation in the wild has been "
        "confirmed. A fix is rolling out through automatic updates. Users should confirm they are "
        "on the latest release and apply additional hardening where possible.",
        (KREBS, THN, BLEEPING),
    ),
)


def fallback_stories(now: Optional[datetime] = None) -> List[Story]:
    now = now or utcnow()
    out: List[Story] = []
    for story_id, hours_ago, category, title, summary, content, refs in _FALLBACK_RECORDS:
        out.append(
            Story(
                id=story_id,
                title=title,
                summary=summary,
                content=content,
                confidence=confidence_for(len(refs)),
                corroborating_source_count=len(refs),
                timestamp=now - timedelta(hours=hours_ago),
                category=category,
                references=refs,
            )
        )
    return out
