"""
@file guidance.py
@brief Safety tips, arrival instructions and evacuation notes

@author SafeEscape Project
@date 2025-12-18
@license AGPL-3.0
"""

from types import MappingProxyType
from typing import Tuple

from safeescape.models.evacuation import Candidate, DisasterType

COMMON_TIPS = (
    "Stay calm and move quickly but safely",
    "Help others only if you can do so safely",
    "Follow instructions from emergency personnel",
)

DISASTER_TIPS = MappingProxyType({
    DisasterType.FLOOD: (
        "Avoid walking through moving water",
        "Don't drive through flooded areas",
        "Move to higher ground immediately",
    ),
    DisasterType.FIRE: (
        "Stay low to avoid smoke inhalation",
        "Cover mouth with wet cloth if possible",
        "Test doors for heat before opening",
    ),
    DisasterType.EARTHQUAKE: (
        "Drop, cover, and hold on until shaking stops",
        "Stay away from windows and exterior walls",
        "Watch for fallen power lines and gas leaks",
    ),
})

DESTINATION_NOTES = MappingProxyType({
    "hospital": (
        "This hospital may be treating disaster victims. Expect crowded conditions.",
        "Medical assistance will be prioritized based on injury severity.",
    ),
    "school": (
        "Schools are designated emergency shelters with basic facilities.",
        "Report to administrative staff upon arrival for registration.",
    ),
    "stadium": (
        "Large capacity shelter with open space for many evacuees.",
        "Follow posted signs to designated assembly areas.",
    ),
})

DISASTER_NOTES = MappingProxyType({
    DisasterType.FLOOD: (
        "Avoid walking through moving water - even 6 inches can knock you down.",
        "Be aware of areas where floodwaters have receded - roads may be weakened.",
    ),
    DisasterType.FIRE: (
        "Stay low to avoid smoke inhalation if present.",
        "Cover your nose and mouth with a wet cloth if possible.",
    ),
    DisasterType.EARTHQUAKE: (
        "Watch for fallen power lines, gas leaks, and aftershocks.",
        "Stay away from damaged buildings and structures.",
    ),
})


def safety_tips(disaster_type: DisasterType) -> Tuple[str, ...]:
    return COMMON_TIPS + DISASTER_TIPS.get(disaster_type, ())


def arrival_instructions(destination: Candidate) -> Tuple[str, ...]:
    where = f"{destination.name} at {destination.address}" if destination.address else destination.name
    instructions = (
        f"Proceed to {where}",
        "Check in with emergency services upon arrival",
        "Bring essential medications and documents if possible",
    )
    if destination.category == "hospital":
        instructions += ("Medical triage will be performed on arrival",)
    elif destination.category in ("school", "stadium"):
        instructions += ("Temporary shelter facilities will be available",)
    return instructions


def evacuation_notes(destination_category: str, disaster_type: DisasterType) -> Tuple[str, ...]:
    """General, destination-specific then disaster-specific notes."""
    return (
        "Move quickly but safely. Don't rush to the point of injury.",
        "Help others only if you can do so safely.",
        "Follow instructions from emergency personnel if present.",
    ) + DESTINATION_NOTES.get(destination_category, ()) + DISASTER_NOTES.get(disaster_type, ())
