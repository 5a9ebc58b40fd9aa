"""Complaint classification: fir vs non-fir.

Decisions are made in three tiers:

1. Cold start: when the model is not ready or the text has no usable
   tokens, count seed keywords occurring in the token string and pick the
   side with more hits (fixed 0.6/0.4 probabilities).
2. Rule override: administrative cue words without any strong violent-crime
   keyword short-circuit to non-fir (fixed 0.35/0.65).
3. Bayesian scoring: multinomial naive Bayes over TF-IDF weighted tokens
   with Laplace smoothing, normalized with log-sum-exp. Weak fir scores
   (below 0.6) without a strong keyword are forced to non-fir.

The classifier never raises for any input text.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Any, Iterable

from .lexicon import NON_FIR_CUES, SEED_FIR, SEED_NON_FIR, STRONG_FIR
from .models import (
    CLASSES,
    FIR,
    MIN_PRIOR,
    NON_FIR,
    ClassificationResult,
    Label,
    ModelState,
)
from .preprocessing import preprocess

logger = logging.getLogger(__name__)

ALPHA = 1.0
WEAK_FIR_THRESHOLD = 0.6

COLD_START_PROBS = (0.6, 0.4)
RULE_PROBS = (0.35, 0.65)

TIER_COLD_START = "cold_start"
TIER_RULE = "rule"
TIER_BAYES = "bayes"


def tfidf_weights(tokens: list[str], idf: dict[str, float]) -> dict[str, float]:
    """TF-IDF weight per distinct token.

    ``tf`` is the token's share of the text and ``idf`` defaults to 0 for
    tokens the model has never seen.
    """
    counts = Counter(tokens)
    doc_len = len(tokens) or 1
    return {token: (c / doc_len) * idf.get(token, 0.0) for token, c in counts.items()}


class ComplaintClassifier:
    """Labels complaint texts using an injected ``ModelState``.

    Example::

        state = ModelState()
        Trainer(state).fit_examples(examples)

        result = ComplaintClassifier(state).classify("My bike was stolen")
        print(result.label)     # Label.FIR
        print(result.prob_fir)  # 0.93

    Args:
        state: Model state read at classification time. It is not
            copied, so retraining the state changes later results.
        alpha: Laplace smoothing constant.
    """

    def __init__(self, state: ModelState, alpha: float = ALPHA) -> None:
        self.state = state
        self.alpha = alpha

    def classify(self, text: Any) -> ClassificationResult:
        """Classify a single complaint text.

        Args:
            text: Complaint description. ``None`` and non-strings are
                coerced rather than rejected.

        Returns:
            ClassificationResult with label, probabilities and tokens.
        """
        tokens = preprocess(text)
        if not self.state.ready or not tokens:
            return self._cold_start(tokens)

        token_set = set(tokens)
        has_strong_fir = not token_set.isdisjoint(STRONG_FIR)
        has_non_fir_cue = not token_set.isdisjoint(NON_FIR_CUES)
        if not has_strong_fir and has_non_fir_cue:
            logger.debug("Rule override to non-fir for tokens %s", tokens)
            return ClassificationResult(
                label=Label.NON_FIR,
                prob_fir=RULE_PROBS[0],
                prob_non_fir=RULE_PROBS[1],
                tokens=tokens,
                tier=TIER_RULE,
            )

        prob_fir, prob_non_fir = self._posterior(tokens)
        label = Label.FIR if prob_fir >= prob_non_fir else Label.NON_FIR
        if not has_strong_fir and prob_fir < WEAK_FIR_THRESHOLD:
            label = Label.NON_FIR

        return ClassificationResult(
            label=label,
            prob_fir=prob_fir,
            prob_non_fir=prob_non_fir,
            tokens=tokens,
            tier=TIER_BAYES,
        )

    def classify_batch(self, texts: Iterable[Any]) -> list[ClassificationResult]:
        """Classify multiple complaint texts."""
        return [self.classify(text) for text in texts]

    def token_weights(self, text: Any) -> dict[str, float]:
        """TF-IDF weights the Bayesian tier would use for ``text``."""
        return tfidf_weights(preprocess(text), self.state.idf)

    def most_informative_tokens(
        self,
        label: Label | str,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        """Return the tokens that most favour ``label`` over the other class.

        Scores are smoothed log-likelihood ratios
        ``ln P(token | label) - ln P(token | other)``.

        Args:
            label: Target label.
            top_n: Number of tokens to return.

        Returns:
            List of (token, log_likelihood_ratio) tuples, highest first.

        Raises:
            RuntimeError: If the model has not been trained.
        """
        if not self.state.ready:
            raise RuntimeError("Model not trained. Run a training strategy first.")

        target = Label.parse(label).key
        other = NON_FIR if target == FIR else FIR
        ratios = [
            (token, round(self._log_likelihood(target, token) - self._log_likelihood(other, token), 4))
            for token in self.state.vocab
        ]
        ratios.sort(key=lambda x: (-x[1], x[0]))
        return ratios[:top_n]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cold_start(self, tokens: list[str]) -> ClassificationResult:
        joined = " ".join(tokens)
        fir_hits = sum(1 for kw in SEED_FIR if kw in joined)
        non_fir_hits = sum(1 for kw in SEED_NON_FIR if kw in joined)
        fir_wins = fir_hits >= non_fir_hits
        high, low = COLD_START_PROBS
        return ClassificationResult(
            label=Label.FIR if fir_wins else Label.NON_FIR,
            prob_fir=high if fir_wins else low,
            prob_non_fir=low if fir_wins else high,
            tokens=tokens,
            tier=TIER_COLD_START,
        )

    def _log_likelihood(self, cls: str, token: str) -> float:
        state = self.state
        vocab_size = max(state.vocab_size, 1)
        numerator = state.cond[cls].get(token, 0) + self.alpha
        denominator = state.totals[cls] + self.alpha * vocab_size
        return math.log(numerator / denominator)

    def _posterior(self, tokens: list[str]) -> tuple[float, float]:
        state = self.state
        weights = tfidf_weights(tokens, state.idf)

        log_scores: dict[str, float] = {}
        for cls in CLASSES:
            score = math.log(state.priors[cls] or MIN_PRIOR)
            for token, weight in weights.items():
                score += weight * self._log_likelihood(cls, token)
            log_scores[cls] = score

        # Log-sum-exp for numerical stability
        max_score = max(log_scores.values())
        exp_scores = {cls: math.exp(s - max_score) for cls, s in log_scores.items()}
        total = sum(exp_scores.values())
        return exp_scores[FIR] / total, exp_scores[NON_FIR] / total
