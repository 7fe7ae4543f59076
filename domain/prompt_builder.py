"""Prompt text for the per-player session summary request."""

SYSTEM_PROMPT = (
    "You are a careful chronicler who writes precise, helpful bullet points "
    "about tabletop roleplaying sessions."
)


def build_summary_prompt(players: list[str], transcript: str) -> str:
    """Builds the instruction text asking for a DM overview and player recaps."""
    player_list = ", ".join(players)
    return f"""You are preparing a session recap for the Dungeon Master and individualized player summaries for a tabletop RPG session.
Players: {player_list}.
Transcript of the session:
\"\"\"
{transcript}
\"\"\"

Return a strict JSON object with the following shape (do not include any extra commentary or markdown):
{{
  "dmSummary": "Overview of the session for the Dungeon Master",
  "players": [
    {{ "name": "Player name", "points": ["bullet point", "bullet point", "bullet point"] }}
  ]
}}

Rules:
- "dmSummary" must be 3 to 6 sentences covering table-wide developments and hooks worth following up next session.
- Include exactly one entry for every player that was provided, using the name exactly as given.
- Do not include entries for anyone who is not in the player list.
- Use between 3 and 10 concise bullets per player covering notable events.
- When an event in the transcript directly mentions a given player by name, give that event extra weight and detail in that player's bullets.
- If the transcript does not mention the player at all, provide at least one bullet describing their lack of involvement or presumed presence.
- Do not fabricate events that are not supported by the transcript."""
