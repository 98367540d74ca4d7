"""
File-based storage for the training profile and session history.

Layout of a data directory (default ``~/.lift531``):

    profile.json     serialized TrainingProfile
    history.jsonl    one session per line, in append order

History order is significant (assistance "last weight used" searches from
the end), so sessions are never re-sorted.
"""

import json
from pathlib import Path

from ..core.models import TrainingProfile, WorkoutSession
from .serializers import (
    ValidationError,
    dict_to_export,
    dict_to_profile,
    export_to_dict,
    json_line_to_session,
    profile_to_dict,
    rewrap_error,
    session_to_json_line,
)


class ProfileStore:
    """
    Manages profile.json and history.jsonl inside one data directory.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding profile.json and history.jsonl
        """
        self.data_dir = Path(data_dir)
        self.profile_path = self.data_dir / "profile.json"
        self.history_path = self.data_dir / "history.jsonl"

    def exists(self) -> bool:
        """Check if a profile has been initialized."""
        return self.profile_path.exists()

    def init(self, profile: TrainingProfile) -> None:
        """
        Create the data directory, write the profile and an empty history.

        An existing history file is left untouched.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.save_profile(profile)
        if not self.history_path.exists():
            self.history_path.touch()

    def load_profile(self) -> TrainingProfile:
        """
        Load the profile from profile.json.

        Raises:
            FileNotFoundError: If the profile has not been initialized
            ValidationError: If the file is not a valid profile
        """
        if not self.profile_path.exists():
            raise FileNotFoundError(
                f"Profile not found: {self.profile_path}. Run 'init' first."
            )
        try:
            with open(self.profile_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {self.profile_path}: {e}") from e
        return dict_to_profile(data)

    def save_profile(self, profile: TrainingProfile) -> None:
        """Write the profile to profile.json."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.profile_path, "w", encoding="utf-8") as f:
            json.dump(profile_to_dict(profile), f, indent=2)

    def load_history(self) -> list[WorkoutSession]:
        """
        Load all sessions from history.jsonl, in append order.

        A missing history file is an empty history.

        Raises:
            ValidationError: If a line cannot be parsed (message names the line)
        """
        if not self.history_path.exists():
            return []

        sessions: list[WorkoutSession] = []
        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    sessions.append(json_line_to_session(line))
                except (ValidationError, KeyError, TypeError, ValueError) as e:
                    raise rewrap_error(
                        e,
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e
        return sessions

    def append_session(self, session: WorkoutSession) -> None:
        """Append one session to the end of history.jsonl."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.history_path, "a", encoding="utf-8") as f:
            f.write(session_to_json_line(session) + "\n")

    def replace_history(self, sessions: list[WorkoutSession]) -> None:
        """Rewrite history.jsonl with exactly these sessions."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.history_path, "w", encoding="utf-8") as f:
            for session in sessions:
                f.write(session_to_json_line(session) + "\n")

    def delete_session(self, session_id: str) -> WorkoutSession:
        """
        Delete the session with the given id.

        Returns:
            The removed session

        Raises:
            KeyError: If no session has that id
        """
        sessions = self.load_history()
        for i, session in enumerate(sessions):
            if session.id == session_id:
                del sessions[i]
                self.replace_history(sessions)
                return session
        raise KeyError(f"No session with id '{session_id}'")

    def export_document(self, path: str | Path) -> int:
        """
        Write {"version", "profile", "history"} to path.

        Returns:
            Number of sessions exported
        """
        profile = self.load_profile()
        history = self.load_history()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(export_to_dict(profile, history), f, indent=2)
        return len(history)

    def import_document(self, path: str | Path) -> tuple[TrainingProfile, int]:
        """
        Replace the stored profile and history with an export document.

        The document is fully validated before anything is written.

        Returns:
            (imported profile, number of sessions imported)

        Raises:
            ValidationError: If the document is malformed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e

        profile, history = dict_to_export(data)
        self.save_profile(profile)
        self.replace_history(history)
        return profile, len(history)


def get_default_data_dir() -> Path:
    """Default data directory: ~/.lift531"""
    return Path.home() / ".lift531"
