"""Keyword-matched canned answers used when the AI upstream is unavailable."""

from __future__ import annotations

from chat_proxy.schemas.chat import FallbackChoice, FallbackMessage, FallbackResponse

# Checked in order; the first entry with a keyword contained in the
# lowercased message wins.
FALLBACK_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("halo", "hello"),
        "Halo! Selamat datang di PT. Teknologi Maju Indonesia. Saya siap membantu Anda "
        "dengan informasi perusahaan dan lowongan kerja.",
    ),
    (
        ("lowongan", "kerja"),
        "Kami memiliki 4 posisi tersedia: Senior Frontend Developer (15-25 juta), "
        "Data Scientist (18-30 juta), Product Manager (20-35 juta), dan DevOps Engineer "
        "(16-28 juta). Posisi mana yang ingin Anda ketahui?",
    ),
    (
        ("perusahaan",),
        "PT. Teknologi Maju Indonesia didirikan pada 2015 dengan 500+ karyawan di Jakarta. "
        "Kami fokus pada solusi teknologi untuk transformasi digital Indonesia.",
    ),
)

DEFAULT_ANSWER = (
    "Terima kasih atas pertanyaan Anda. Untuk informasi lebih lanjut, silakan hubungi HR "
    "kami di hr@teknologimaju.co.id"
)


def respond(message: str | None) -> str:
    """Pick the canned answer for a user message.

    Examples:
        >>> respond("Hello there").startswith("Halo!")
        True
        >>> respond(None) == DEFAULT_ANSWER
        True
    """
    text = (message or "").lower()
    for keywords, answer in FALLBACK_RULES:
        if any(keyword in text for keyword in keywords):
            return answer
    return DEFAULT_ANSWER


def build_fallback_response(message: str | None) -> FallbackResponse:
    return FallbackResponse(
        choices=[FallbackChoice(message=FallbackMessage(content=respond(message)))],
    )
