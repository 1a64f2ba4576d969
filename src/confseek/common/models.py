"""Common models used across confseek."""

from typing import Literal

from pydantic import BaseModel, Field

from confseek.constants import APP_NAME


class AppInfo(BaseModel):
    project_name: str = APP_NAME
    version: str = "0.1.0"
    environment: Literal["test", "dev", "prod"] = "prod"


class LoaderSettings(BaseModel):
    """Defaults applied by the loader when a source or call does not say otherwise.

    Attributes:
        default_extensions: Extensions tried for every base name, in order. The empty
            string stands for the bare base name.
        temp_prefix: Prefix of the sibling file written for transformed sources.
        evaluator: Backend used to evaluate config files as Python code.
    """

    default_extensions: tuple[str, ...] = ("py", "json", "toml", "yaml", "yml", "")
    temp_prefix: str = Field(default=f"__{APP_NAME}_", min_length=1)
    evaluator: Literal["tracked", "native"] = "tracked"
