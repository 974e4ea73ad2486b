from dataclasses import dataclass
import os


@dataclass
class YouTrackConfig:
    base_uri: str = ""
    token: str = ""
    project_id: str = ""
    project_key: str = ""
    timeout: int = 20

    @classmethod
    def from_env(cls) -> "YouTrackConfig":
        return cls(
            base_uri=os.environ.get("YOUTRACK_BASE_URI", ""),
            token=os.environ.get("YOUTRACK_TOKEN", ""),
            project_id=os.environ.get("YOUTRACK_PROJECT_ID", ""),
            project_key=os.environ.get("YOUTRACK_PROJECT_KEY", ""),
        )
