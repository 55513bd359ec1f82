"""Denylist-based safety check for task shell commands.

This is string matching, not shell parsing. Obfuscated invocations and
binaries missing from the denylist pass the check; it is a blocklist, not a
sandbox.
"""

from __future__ import annotations

# Checked in this order; the first match is reported.
DANGEROUS_COMMANDS: tuple[str, ...] = (
    # File system operations
    "rm",
    "rmdir",
    "del",
    "delete",
    "format",
    # Network operations
    "wget",
    "curl",
    "nc",
    "netcat",
    "telnet",
    # Privilege and account operations
    "sudo",
    "su",
    "chmod",
    "chown",
    "passwd",
    # Process operations
    "kill",
    "killall",
    "pkill",
    # Archive operations
    "tar",
    "zip",
    "unzip",
    "gzip",
    "gunzip",
    # Shells and interpreters
    "bash",
    "sh",
    "zsh",
    "fish",
    "csh",
    "tcsh",
    "python",
    "python3",
    "perl",
    "ruby",
    "node",
    "java",
    # Database clients
    "mysql",
    "psql",
    "mongo",
    "redis-cli",
    # Sensitive system files
    "shadow",
    "hosts",
)

DANGEROUS_PATTERNS: tuple[str, ...] = (
    "|",
    "&&",
    "||",
    ";",
    "`",
    "$(",
    ">",
    ">>",
    "<",
    "<<",
    "&",
    "!",
    "*",
    "?",
)

SAFE_COMMAND_EXAMPLES: tuple[str, ...] = (
    "echo Hello World",
    "date",
    "whoami",
    "pwd",
    "ls",
    "cat filename.txt",
    "head filename.txt",
    "tail filename.txt",
    "wc filename.txt",
    "sleep 5",
)


class CommandValidator:
    """Stateless safety check for raw command strings."""

    def is_safe(self, command: str | None) -> bool:
        """Return True when the command passes the denylist checks."""
        return self.unsafe_reason(command) is None

    def unsafe_reason(self, command: str | None) -> str | None:
        """Return why the command is unsafe, or None when it is safe."""
        if command is None or not command.strip():
            return "Command is null or empty"

        normalized = command.lower().strip()
        for name in DANGEROUS_COMMANDS:
            if normalized == name or normalized.startswith(name + " "):
                return f"Command contains dangerous operation: {name}"

        # Patterns match against the original, non-normalized command
        for pattern in DANGEROUS_PATTERNS:
            if pattern in command:
                return f"Command contains dangerous pattern: {pattern}"

        return None

    def safe_command_examples(self) -> list[str]:
        """List example commands that pass the check."""
        return list(SAFE_COMMAND_EXAMPLES)
