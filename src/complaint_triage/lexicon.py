"""Fixed word lists used by normalization, seeding and rule overrides."""

from __future__ import annotations

STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "if", "then", "else",
    "on", "in", "at", "to", "from", "by", "for", "of", "with", "without",
    "about", "as", "into", "like", "through", "over", "after", "before",
    "between", "under", "above", "not", "no", "nor",
    "be", "is", "are", "was", "were", "am", "been", "being",
    "do", "does", "did", "doing", "have", "has", "had", "having",
    "can", "could", "should", "would", "may", "might", "must", "will", "shall",
    "you", "your", "yours", "me", "my", "mine", "we", "our", "ours",
    "they", "their", "theirs", "he", "she", "it",
    "this", "that", "these", "those",
})

# Seed vocabularies: each keyword is treated as a one-token document of its
# class when no data-backed training is possible, and drives the cold-start
# substring heuristic.
SEED_FIR: tuple[str, ...] = (
    "stolen", "robbery", "theft", "assault", "violence", "attack",
    "murder", "rape", "kidnap", "burglary", "snatch", "threat",
    "extortion", "arson", "hit", "kill", "weapon", "injury",
    "molest", "harass", "beat", "fight", "crime", "abuse", "illegal",
)

SEED_NON_FIR: tuple[str, ...] = (
    "noc", "verification", "certificate", "passport", "address",
    "proof", "character", "police", "clearance", "document",
    "lost", "missing", "misplace", "found", "helpdesk", "service",
    "issue", "request", "application",
    # upper-case: never produced by the normalizer, so it only counts
    # toward the seed vocabulary size
    "ID",
    "card", "wallet", "booking", "info", "support", "feedback",
)

# Unambiguous violent-crime keywords; their presence disables the
# administrative-cue override and the weak-fir guard.
STRONG_FIR: frozenset[str] = frozenset({
    "stolen", "robbery", "assault", "murder", "rape", "kidnap",
    "burglary", "snatch", "extortion", "weapon", "violence", "attack",
})

NON_FIR_CUES: frozenset[str] = frozenset({
    "lost", "missing", "misplace", "noc", "verification", "certificate",
    "passport", "address", "proof", "clearance", "document", "found",
    "service", "issue", "request", "application", "support", "feedback",
})
