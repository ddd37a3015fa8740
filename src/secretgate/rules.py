"""Detection rules for SecretGate.

The rule table is plain data: adding a pattern means adding a row, not
touching the scanner. Content rules are matched line by line; path rules
are matched once against the staged path.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass

from secretgate.config import SecretGateConfig
from secretgate.errors import ConfigError

CONTENT = "content"
PATH = "path"


@dataclass(frozen=True)
class Rule:
    """A single named detection pattern."""

    rule_id: str
    description: str
    pattern: re.Pattern
    target: str = CONTENT


def _rule(rule_id: str, description: str, pattern: str, target: str = CONTENT) -> Rule:
    return Rule(rule_id, description, re.compile(pattern), target)


# --- Known secret formats ---

DEFAULT_RULES: tuple[Rule, ...] = (
    _rule(
        "aws-access-key-id",
        "AWS Access Key ID",
        r"""\b(?:AKIA|ASIA)[0-9A-Za-z]{16}\b""",
    ),
    _rule(
        "aws-secret-access-key",
        "AWS Secret Access Key",
        r"""(?i)aws.{0,20}?(?:secret|private).{0,20}?[:=]\s*["']?[A-Za-z0-9/+=]{40}(?![A-Za-z0-9/+=])""",
    ),
    _rule(
        "google-api-key",
        "Google API Key",
        r"""\bAIza[0-9A-Za-z\-_]{35}""",
    ),
    _rule(
        "github-token",
        "GitHub token",
        r"""\bgh[pousr]_[0-9A-Za-z]{36,}""",
    ),
    _rule(
        "github-fine-grained-token",
        "GitHub fine-grained personal access token",
        r"""\bgithub_pat_[0-9A-Za-z_]{22,}""",
    ),
    _rule(
        "slack-token",
        "Slack token",
        r"""\bxox[abposr]-[0-9A-Za-z\-]{10,}""",
    ),
    _rule(
        "secret-key",
        "API secret key (OpenAI/Stripe pattern)",
        r"""\b(?:sk|rk)[-_](?:live[-_]|test[-_]|proj[-_])?[0-9A-Za-z]{20,}""",
    ),
    _rule(
        "private-key",
        "Private key block",
        r"""-----BEGIN (?:RSA |EC |DSA |OPENSSH |PGP |ENCRYPTED )?PRIVATE KEY(?: BLOCK)?-----""",
    ),
    _rule(
        "bearer-token",
        "Bearer token",
        r"""(?i)\bbearer\s+[a-z0-9\-._~+/]{20,}=*""",
    ),
    _rule(
        "credentials-in-url",
        "URL or connection string with embedded credentials",
        r"""(?i)\b[a-z][a-z0-9+.\-]*://[^\s:/@"']+:[^\s@/"']+@[^\s"']+""",
    ),
    _rule(
        "hardcoded-credential",
        "Hardcoded credential",
        r"""(?i)(?:password|passwd|pwd|secret|api[_-]?key|auth[_-]?token|access[_-]?token)[a-z0-9_-]{0,20}["']?\s*[:=]\s*["'][^"'\s]{6,}["']""",
    ),
    # Files that should never be committed at all
    _rule(
        "sensitive-file",
        "Sensitive file type committed",
        r"""(?i)(?:^|/)(?:\.env(?:\.(?!example$|sample$|template$)[^/]+)?|id_(?:rsa|dsa|ecdsa|ed25519)|[^/]+\.(?:pem|key|p12|pfx|jks|keystore))$""",
        target=PATH,
    ),
)


def build_rules(config: SecretGateConfig) -> list[Rule]:
    """Build the active rule list: defaults minus disabled, plus user rules.

    Raises:
        ConfigError: If a user rule has an invalid regular expression or
            reuses an existing rule id.
    """
    disabled = set(config.disabled_rules)
    rules = [r for r in DEFAULT_RULES if r.rule_id not in disabled]
    seen = {r.rule_id for r in DEFAULT_RULES}

    for user_rule in config.rules:
        if user_rule.rule_id in seen:
            raise ConfigError(f"duplicate rule id: {user_rule.rule_id}")
        seen.add(user_rule.rule_id)
        if user_rule.rule_id in disabled:
            continue
        try:
            pattern = re.compile(user_rule.pattern)
        except re.error as e:
            raise ConfigError(f"rule {user_rule.rule_id!r}: invalid pattern: {e}") from e
        rules.append(
            Rule(
                rule_id=user_rule.rule_id,
                description=user_rule.description or user_rule.rule_id,
                pattern=pattern,
                target=user_rule.target,
            )
        )

    return rules


# --- High-entropy detection ---

ENTROPY_RULE_ID = "high-entropy-string"
_QUOTED_TOKEN = re.compile(r"""["']([A-Za-z0-9+/=\-_]+)["']""")


def shannon_entropy(data: str) -> float:
    """Calculate Shannon entropy of a string."""
    if not data:
        return 0.0
    counts = Counter(data)
    length = len(data)
    entropy = 0.0
    for count in counts.values():
        prob = count / length
        entropy -= prob * math.log2(prob)
    return entropy


def high_entropy_tokens(line: str, threshold: float, min_length: int) -> list[tuple[int, str, float]]:
    """Return ``(start, token, entropy)`` for quoted tokens above the threshold."""
    hits = []
    for match in _QUOTED_TOKEN.finditer(line):
        token = match.group(1)
        if len(token) < min_length:
            continue
        entropy = shannon_entropy(token)
        if entropy >= threshold:
            hits.append((match.start(1), token, entropy))
    return hits
