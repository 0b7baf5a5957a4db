"""solana-auditor: static analysis orchestration for Solana/Anchor programs."""

__version__ = "0.3.0"
