from typing import Annotated

from pydantic import Field

from image_mirror.config.shared import MirrorYAMLModel


class Auth(MirrorYAMLModel):
    """Credentials used to log into a registry."""

    username: Annotated[str, Field(default="", description="Registry username.")]
    password: Annotated[str, Field(default="", description="Registry password or token.")]

    @property
    def is_empty(self) -> bool:
        """Returns True if no credentials are set."""
        return not self.username and not self.password

    def to_yaml(self) -> dict[str, str]:
        """Returns the persisted form of the credentials, omitting unset fields."""
        data = {}
        if self.username:
            data["username"] = self.username
        if self.password:
            data["password"] = self.password
        return data
