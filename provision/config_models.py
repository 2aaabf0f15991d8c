# provision/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for workspace bootstrap configuration.

This module defines the structured settings for the bootstrapper,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
PROFILE_DEFAULT: str = "gpu"
LOG_PREFIX_DEFAULT: str = "[WS-BOOTSTRAP]"

WORKSPACE_ROOT_DEFAULT: str = "/workspace"
DATA_DIR_DEFAULT: str = "/workspace-data"
MODELS_DIR_DEFAULT: str = "/workspace-models"
DB_DIR_DEFAULT: str = "/workspace-db"
BIN_DIR_DEFAULT: str = "/usr/local/bin"
CLONE_TEMP_DIR_DEFAULT: str = "/tmp/privateGPT-temp"
MARKER_FILE_DEFAULT: str = "pyproject.toml"
VENV_DIR_NAME_DEFAULT: str = ".venv"
ENV_FILE_NAME_DEFAULT: str = ".env"

OWNER_USER_DEFAULT: str = "vscode"
OWNER_GROUP_DEFAULT: str = "vscode"

REPOSITORY_URL_DEFAULT: str = "https://github.com/imartinez/privateGPT.git"

PYTHON_INSTALLER_COMMAND_DEFAULT: str = "uv"
PYTHON_EXTRAS_DEFAULT: List[str] = ["local", "ui", "test"]
GPU_MONITORING_PACKAGES_DEFAULT: List[str] = ["nvidia-ml-py", "gpustat"]
NODE_PACKAGES_DEFAULT: List[str] = ["pnpm"]

API_HOST_DEFAULT: str = "0.0.0.0"
API_PORT_DEFAULT: int = 8000
UI_PORT_DEFAULT: int = 8501

TORCH_CUDA_ARCH_LIST_DEFAULT: str = "7.5;8.0;8.6;8.9;9.0"
REDIS_URL_DEFAULT: str = "redis://localhost:6379/0"

SAMPLE_LLM_URL_DEFAULT: str = (
    "https://huggingface.co/TheBloke/Mistral-7B-Instruct-v0.2-GGUF/"
    "resolve/main/mistral-7b-instruct-v0.2.Q4_K_M.gguf"
)
SAMPLE_LLM_FILENAME_DEFAULT: str = "mistral-7b-instruct-v0.2.Q4_K_M.gguf"
EMBEDDING_MODEL_DIR_DEFAULT: str = "embedding"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
    "gpu": "📊",
    "skip": "⏭️",
}


class PathSettings(BaseModel):
    """Filesystem layout of the workspace and its sibling directories."""

    workspace_root: Path = Field(
        default=Path(WORKSPACE_ROOT_DEFAULT),
        description="Directory the application is cloned into.",
    )
    data_dir: Path = Field(default=Path(DATA_DIR_DEFAULT))
    models_dir: Path = Field(default=Path(MODELS_DIR_DEFAULT))
    db_dir: Path = Field(default=Path(DB_DIR_DEFAULT))
    chroma_dir_name: str = Field(default="chroma")
    extra_dirs: List[Path] = Field(
        default_factory=list,
        description="Additional directories created next to the data directories.",
    )
    bin_dir: Path = Field(
        default=Path(BIN_DIR_DEFAULT),
        description="Shared directory the helper scripts are installed into.",
    )
    clone_temp_dir: Path = Field(default=Path(CLONE_TEMP_DIR_DEFAULT))
    marker_file: str = Field(
        default=MARKER_FILE_DEFAULT,
        description="File inside the workspace root whose presence means 'already cloned'.",
    )
    venv_dir_name: str = Field(default=VENV_DIR_NAME_DEFAULT)
    env_file_name: str = Field(default=ENV_FILE_NAME_DEFAULT)

    @property
    def marker_path(self) -> Path:
        return self.workspace_root / self.marker_file

    @property
    def venv_path(self) -> Path:
        return self.workspace_root / self.venv_dir_name

    @property
    def venv_python(self) -> Path:
        return self.venv_path / "bin" / "python"

    @property
    def env_file_path(self) -> Path:
        return self.workspace_root / self.env_file_name

    @property
    def chroma_dir(self) -> Path:
        return self.db_dir / self.chroma_dir_name

    def owned_directories(self) -> List[Path]:
        """Workspace root plus every data directory, in creation order."""
        return [
            self.workspace_root,
            self.data_dir,
            self.models_dir,
            self.db_dir,
            self.chroma_dir,
            *self.extra_dirs,
        ]


class OwnerSettings(BaseModel):
    """Non-root account that must own the workspace."""

    user: str = Field(default=OWNER_USER_DEFAULT)
    group: str = Field(default=OWNER_GROUP_DEFAULT)

    @property
    def spec(self) -> str:
        return f"{self.user}:{self.group}"


class RepositorySettings(BaseModel):
    """Upstream application repository."""

    url: str = Field(default=REPOSITORY_URL_DEFAULT)
    ref: Optional[str] = Field(
        default=None, description="Branch or tag to clone. None clones the default branch."
    )
    depth: Optional[int] = Field(default=None, description="Shallow clone depth.")


class PythonEnvSettings(BaseModel):
    """Python tooling used for the virtual environment and dependency install."""

    installer_command: str = Field(default=PYTHON_INSTALLER_COMMAND_DEFAULT)
    extras: List[str] = Field(default_factory=lambda: list(PYTHON_EXTRAS_DEFAULT))
    gpu_monitoring_packages: List[str] = Field(
        default_factory=lambda: list(GPU_MONITORING_PACKAGES_DEFAULT)
    )

    @property
    def editable_target(self) -> str:
        if not self.extras:
            return "."
        return f".[{','.join(self.extras)}]"


class NodeSettings(BaseModel):
    """Global Node tooling installed for the dev profile."""

    enabled: Optional[bool] = Field(
        default=None,
        description="Install Node tooling. None means 'only for the dev profile'.",
    )
    npm_command: str = Field(default="npm")
    packages: List[str] = Field(default_factory=lambda: list(NODE_PACKAGES_DEFAULT))


class ServerSettings(BaseModel):
    """Listening addresses written to the environment file and wrapper scripts."""

    host: str = Field(default=API_HOST_DEFAULT)
    api_port: int = Field(default=API_PORT_DEFAULT, ge=1, le=65535)
    ui_port: int = Field(default=UI_PORT_DEFAULT, ge=1, le=65535)


class ServiceSettings(BaseModel):
    """Backing service endpoints and secret placeholders for the environment file."""

    device: Optional[str] = Field(
        default=None, description="Torch device. None derives it from the profile."
    )
    pgpt_profiles: Optional[str] = Field(
        default=None, description="PGPT_PROFILES value. None derives it from the profile."
    )
    torch_cuda_arch_list: str = Field(default=TORCH_CUDA_ARCH_LIST_DEFAULT)
    database_url: Optional[str] = Field(
        default=None, description="DATABASE_URL value. None places a SQLite file in the db directory."
    )
    redis_url: str = Field(default=REDIS_URL_DEFAULT)
    s3_endpoint_url: str = Field(default="")
    s3_access_key_id: str = Field(default="")
    s3_secret_access_key: str = Field(default="")
    openai_api_key: str = Field(default="")
    hf_token: str = Field(default="")
    app_log_level: str = Field(default="INFO")
    app_log_file: Optional[str] = Field(
        default=None, description="LOG_FILE value. None places it under the data directory."
    )


class ModelArtifact(BaseModel):
    """A downloadable model file."""

    name: str
    url: str
    filename: str


class ModelSettings(BaseModel):
    """Optional sample model download."""

    prompt_for_sample: bool = Field(
        default=True, description="Ask before downloading the sample models."
    )
    sample_models: List[ModelArtifact] = Field(
        default_factory=lambda: [
            ModelArtifact(
                name="Mistral 7B Instruct (Q4_K_M)",
                url=SAMPLE_LLM_URL_DEFAULT,
                filename=SAMPLE_LLM_FILENAME_DEFAULT,
            )
        ]
    )
    llm_filename: str = Field(default=SAMPLE_LLM_FILENAME_DEFAULT)
    embedding_dir_name: str = Field(default=EMBEDDING_MODEL_DIR_DEFAULT)
    download_timeout_seconds: int = Field(default=120, ge=1)


class HelperScript(BaseModel):
    """
    A one-line wrapper installed into the shared bin directory.

    `command` is formatted with the placeholders {workspace}, {venv_python},
    {data_dir}, {models_dir}, {host}, {api_port} and {ui_port}.
    """

    name: str
    description: str
    command: str
    profiles: List[str] = Field(default_factory=lambda: ["gpu", "dev"])


GPU_INFO_SNIPPET: str = """\
import torch
print('=== GPU Information ===')
print(f'PyTorch CUDA available: {torch.cuda.is_available()}')
if torch.cuda.is_available():
    for i in range(torch.cuda.device_count()):
        print(f'GPU {i}: {torch.cuda.get_device_name(i)}')
        print(f'  Memory: {torch.cuda.get_device_properties(i).total_memory / 1e9:.2f} GB')
"""

HELPER_SCRIPTS_DEFAULT: List[Dict[str, object]] = [
    {
        "name": "start-api",
        "description": "Start API server",
        "command": 'cd {workspace} && exec {venv_python} -m private_gpt "$@"',
    },
    {
        "name": "start-ui",
        "description": "Start Streamlit UI",
        "command": (
            "cd {workspace} && exec {venv_python} -m streamlit run private_gpt/ui/ui.py "
            '--server.address {host} --server.port {ui_port} "$@"'
        ),
    },
    {
        "name": "ingest-docs",
        "description": "Ingest documents from the data directory",
        "command": 'cd {workspace} && exec {venv_python} scripts/ingest_folder.py {data_dir} "$@"',
    },
    {
        "name": "setup-models",
        "description": "Download the models configured for PrivateGPT",
        "command": 'cd {workspace} && exec {venv_python} scripts/setup "$@"',
    },
    {
        "name": "gpu-info",
        "description": "Show GPU information",
        "command": (
            '{venv_python} -c "'
            + GPU_INFO_SNIPPET.replace("{", "{{").replace("}", "}}")
            + '"\ngpustat --color'
        ),
        "profiles": ["gpu"],
    },
]


class AppSettings(BaseSettings):
    """Main bootstrap settings."""

    model_config = SettingsConfigDict(
        env_prefix="BOOTSTRAP_", env_nested_delimiter="__", extra="ignore"
    )

    profile: Literal["gpu", "dev"] = Field(
        default=PROFILE_DEFAULT, description="Step variant set to run."
    )
    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT, description="Prefix for bootstrap log messages."
    )
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    interactive: bool = Field(
        default=True, description="Allow prompts. When False every prompt answers 'no'."
    )
    assume_yes: bool = Field(
        default=False, description="Answer 'yes' to every prompt without asking."
    )
    prompt_timeout_seconds: Optional[int] = Field(
        default=30, description="Seconds to wait for a prompt answer on a terminal."
    )
    skip_steps: List[str] = Field(default_factory=list)
    abort_on_failure: List[str] = Field(
        default_factory=list,
        description="Step tags whose failure stops the whole sequence.",
    )

    paths: PathSettings = Field(default_factory=PathSettings)
    owner: OwnerSettings = Field(default_factory=OwnerSettings)
    repository: RepositorySettings = Field(default_factory=RepositorySettings)
    python_env: PythonEnvSettings = Field(default_factory=PythonEnvSettings)
    node: NodeSettings = Field(default_factory=NodeSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    services: ServiceSettings = Field(default_factory=ServiceSettings)
    models: ModelSettings = Field(default_factory=ModelSettings)
    helper_scripts: List[HelperScript] = Field(
        default_factory=lambda: [HelperScript(**h) for h in HELPER_SCRIPTS_DEFAULT]
    )

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @property
    def is_gpu(self) -> bool:
        return self.profile == "gpu"

    @property
    def node_enabled(self) -> bool:
        if self.node.enabled is None:
            return self.profile == "dev"
        return self.node.enabled

    @property
    def device(self) -> str:
        if self.services.device:
            return self.services.device
        return "cuda:0" if self.is_gpu else "cpu"

    @property
    def pgpt_profiles(self) -> str:
        if self.services.pgpt_profiles:
            return self.services.pgpt_profiles
        return "local,dev,gpu" if self.is_gpu else "local,dev"

    @property
    def database_url(self) -> str:
        if self.services.database_url:
            return self.services.database_url
        return f"sqlite:///{self.paths.db_dir / 'privategpt.db'}"

    @property
    def app_log_file(self) -> str:
        if self.services.app_log_file:
            return self.services.app_log_file
        return str(self.paths.data_dir / "logs" / "privategpt.log")

    def helper_scripts_for_profile(self) -> List[HelperScript]:
        return [h for h in self.helper_scripts if self.profile in h.profiles]
