"""
配置加载模块

支持从YAML文件和环境变量加载配置，并提供配置合并功能。

配置优先级（从低到高）：
1. 默认配置 (flashparse/config/default.yaml)
2. 用户配置文件 (.config.yml)
3. 命令行指定的配置文件
4. 环境变量
5. 命令行参数（在CLI中处理）
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger

from flashparse.exceptions import ConfigurationError
from flashparse.models.config import AppConfig

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env_file(env_path: Optional[Path] = None) -> None:
    """
    加载环境变量文件

    Args:
        env_path: .env文件路径，如果为None则自动查找
    """
    if env_path:
        load_dotenv(env_path)
        return

    env_file = find_project_root() / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        home_env = Path.home() / ".flashparse" / ".env"
        if home_env.exists():
            load_dotenv(home_env)


def resolve_env_vars(value: Any) -> Any:
    """
    解析 ${VAR_NAME} 格式的环境变量引用

    Args:
        value: 可能包含环境变量引用的值

    Returns:
        解析后的值
    """
    if isinstance(value, str):
        for var_name in _ENV_VAR_RE.findall(value):
            env_value = os.getenv(var_name)
            if env_value:
                value = value.replace(f"${{{var_name}}}", env_value)
            else:
                logger.warning(f"环境变量 {var_name} 未设置")
        return value
    elif isinstance(value, dict):
        return {k: resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [resolve_env_vars(item) for item in value]
    return value


def load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """
    从YAML文件加载配置

    Args:
        config_path: 配置文件路径

    Returns:
        配置字典

    Raises:
        FileNotFoundError: 配置文件不存在
        ConfigurationError: YAML解析错误或顶层不是映射
    """
    if not config_path.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML解析失败 {config_path}: {e}") from e

    if not config_dict:
        return {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"配置文件顶层必须是映射: {config_path}")

    return resolve_env_vars(config_dict)


def get_default_config_path() -> Path:
    """
    获取默认配置文件路径

    Returns:
        默认配置文件路径
    """
    return Path(__file__).parent.parent / "config" / "default.yaml"


def find_project_root(start_path: Optional[Path] = None) -> Path:
    """
    查找项目根目录

    从起始目录向上查找包含 .git、pyproject.toml 或 README.md 的目录，
    找不到时返回起始目录。

    Args:
        start_path: 起始搜索路径，如果为None则使用当前工作目录

    Returns:
        项目根目录路径
    """
    start = Path(start_path or Path.cwd()).resolve()
    markers = [".git", "pyproject.toml", "README.md"]

    current = start
    while current != current.parent:
        if any((current / marker).exists() for marker in markers):
            return current
        current = current.parent

    return start


def find_user_config_file() -> Optional[Path]:
    """
    在项目根目录下查找用户配置文件 .config.yml

    Returns:
        配置文件路径，如果不存在则返回None
    """
    config_file = find_project_root() / ".config.yml"
    if config_file.exists():
        return config_file
    return None


def validate_config(config_dict: Dict[str, Any]) -> List[str]:
    """
    验证配置参数并返回警告列表

    Args:
        config_dict: 配置字典

    Returns:
        警告信息列表
    """
    warnings = []
    parser = config_dict.get("parser") or {}

    for key in ("min_line_length", "max_line_length", "repetition_ceiling", "max_requested_cards"):
        if key in parser:
            value = parser[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                warnings.append(f"{key} 值 {value} 无效，必须是 >= 1 的整数")

    if "low_yield_threshold" in parser:
        threshold = parser["low_yield_threshold"]
        if not isinstance(threshold, (int, float)) or not 0 <= threshold <= 1:
            warnings.append(f"low_yield_threshold 值 {threshold} 超出有效范围 [0, 1]")

    if "overgeneration_factor" in parser:
        factor = parser["overgeneration_factor"]
        if not isinstance(factor, (int, float)) or factor < 1:
            warnings.append(f"overgeneration_factor 值 {factor} 无效，必须 >= 1")

    if "repetition_policy" in parser:
        valid_policies = ["keep_first", "drop_all"]
        if str(parser["repetition_policy"]).lower() not in valid_policies:
            warnings.append(
                f"repetition_policy '{parser['repetition_policy']}' 无效，"
                f"必须是以下之一: {valid_policies}"
            )

    for rule in parser.get("extra_skip_rules") or []:
        kind = str(rule.get("kind")).lower() if isinstance(rule, dict) else None
        if kind not in ("exact", "prefix", "substring"):
            warnings.append(f"跳过规则 {rule} 无效，kind 必须是 exact/prefix/substring")

    return warnings


def load_config(
    config_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
) -> AppConfig:
    """
    加载应用配置

    Args:
        config_path: 命令行指定的配置文件路径，如果为None则自动查找
        env_file: 环境变量文件路径

    Returns:
        应用配置对象
    """
    load_env_file(env_file)

    # 1. 默认配置
    default_config_path = get_default_config_path()
    if default_config_path.exists():
        merged_config = load_yaml_config(default_config_path)
        logger.debug(f"已加载默认配置: {default_config_path}")
    else:
        merged_config = {}
        logger.warning("默认配置文件不存在，使用空配置")

    # 2. 用户配置文件 .config.yml（未通过命令行指定时）
    if not config_path:
        user_config_file = find_user_config_file()
        if user_config_file:
            logger.info(f"发现用户配置文件: {user_config_file}")
            try:
                merged_config = _merge_dicts(merged_config, load_yaml_config(user_config_file))
                logger.debug(f"已合并用户配置文件: {user_config_file}")
            except ConfigurationError as e:
                logger.warning(f"加载用户配置文件失败: {e}")

    # 3. 命令行指定的配置文件
    if config_path:
        if config_path.exists():
            try:
                merged_config = _merge_dicts(merged_config, load_yaml_config(config_path))
                logger.debug(f"已合并命令行指定的配置文件: {config_path}")
            except ConfigurationError as e:
                logger.warning(f"加载命令行指定的配置文件失败: {e}")
        else:
            logger.warning(f"命令行指定的配置文件不存在: {config_path}")

    # 4. 环境变量
    env_config = _load_from_env()
    if env_config:
        merged_config = _merge_dicts(merged_config, env_config)
        logger.debug("已合并环境变量配置")

    # 5. 验证
    warnings = validate_config(merged_config)
    if warnings:
        logger.warning("配置验证发现以下问题：")
        for warning in warnings:
            logger.warning(f"  - {warning}")

    try:
        return AppConfig.from_dict(merged_config)
    except ValueError as e:
        logger.error(f"配置加载失败: {e}")
        logger.error("请检查配置文件格式是否正确，或使用 --config 参数指定正确的配置文件")
        return AppConfig()


def _parse_bool(name: str, raw: str) -> Optional[bool]:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning(f"无效的 {name} 值: {raw}")
    return None


def _load_from_env() -> Dict[str, Any]:
    """
    从环境变量加载配置

    支持的环境变量：
    - FLASHPARSE_MIN_LINE_LENGTH, FLASHPARSE_MAX_LINE_LENGTH
    - FLASHPARSE_REPETITION_CEILING, FLASHPARSE_REPETITION_POLICY
    - FLASHPARSE_LOW_YIELD_THRESHOLD
    - FLASHPARSE_LENIENT_FALLBACK

    Returns:
        配置字典
    """
    parser_config: Dict[str, Any] = {}

    int_vars = {
        "FLASHPARSE_MIN_LINE_LENGTH": "min_line_length",
        "FLASHPARSE_MAX_LINE_LENGTH": "max_line_length",
        "FLASHPARSE_REPETITION_CEILING": "repetition_ceiling",
    }
    for env_name, key in int_vars.items():
        raw = os.getenv(env_name)
        if raw:
            try:
                parser_config[key] = int(raw)
            except ValueError:
                logger.warning(f"无效的 {env_name} 值: {raw}")

    raw_threshold = os.getenv("FLASHPARSE_LOW_YIELD_THRESHOLD")
    if raw_threshold:
        try:
            parser_config["low_yield_threshold"] = float(raw_threshold)
        except ValueError:
            logger.warning(f"无效的 FLASHPARSE_LOW_YIELD_THRESHOLD 值: {raw_threshold}")

    if os.getenv("FLASHPARSE_REPETITION_POLICY"):
        parser_config["repetition_policy"] = os.getenv("FLASHPARSE_REPETITION_POLICY").lower()

    raw_lenient = os.getenv("FLASHPARSE_LENIENT_FALLBACK")
    if raw_lenient:
        lenient = _parse_bool("FLASHPARSE_LENIENT_FALLBACK", raw_lenient)
        if lenient is not None:
            parser_config["lenient_fallback"] = lenient

    if parser_config:
        return {"parser": parser_config}
    return {}


def _merge_dicts(base: Dict, override: Dict) -> Dict:
    """
    深度合并两个字典

    Args:
        base: 基础字典
        override: 覆盖字典

    Returns:
        合并后的字典
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def save_config(config: AppConfig, config_path: Path) -> None:
    """
    保存配置到YAML文件

    Args:
        config: 配置对象
        config_path: 保存路径
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = {"parser": config.parser.model_dump(mode="json")}

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config_dict, f, default_flow_style=False, allow_unicode=True)

    logger.info(f"配置已保存到: {config_path}")
