"""Collapsing of overlapping mentions produced by a single recognizer."""

from mentionschema import Mention, Mentions

from mentionkit.logging import setup_logging

logger = setup_logging()


def resolve_redundancy(mentions: Mentions) -> list[Mention]:
    """Keep only the longest of each group of overlapping mentions, in place.

    Mentions are examined in their current order. A candidate longer than
    an already kept mention it overlaps replaces it, and is then checked
    against the remaining kept mentions; a candidate that is not strictly
    longer is dropped. When two mentions have the same length, the one
    seen first stays.

    Returns:
        The discarded mentions.
    """
    kept: list[Mention] = []
    discarded: list[Mention] = []
    for candidate in mentions:
        accepted = True
        while accepted:
            rival = next((m for m in kept if m.overlaps_with(candidate)), None)
            if rival is None:
                break
            if candidate.length > rival.length:
                kept = [m for m in kept if m is not rival]
                discarded.append(rival)
            else:
                accepted = False
        if accepted:
            kept.append(candidate)
        else:
            discarded.append(candidate)

    for mention in discarded:
        logger.debug(f"Redundant mention removed: {mention}")
    mentions.clear()
    mentions.extend(kept)
    return discarded


def trim_mentions(mentions: Mentions) -> list[Mention]:
    """Strip non-alphanumeric characters at both ends of every mention, in place.

    Returns:
        The mentions dropped because nothing alphanumeric was left.
    """
    dropped: list[Mention] = []
    result: list[Mention] = []
    for mention in mentions:
        trimmed = mention.trimmed()
        if trimmed is None:
            dropped.append(mention)
        else:
            result.append(trimmed)
    mentions.clear()
    mentions.extend(result)
    return dropped
