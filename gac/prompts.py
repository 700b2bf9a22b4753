"""Prompt construction for commit message generation.

Both builders are pure: the same inputs always render the same text.
``zh-CN`` renders the Chinese templates; every other language renders the
English ones.
"""

from __future__ import annotations

from typing import Sequence

from .analysis import COMMIT_TYPES, ChangeAnalysis
from .config import Config
from .git import CommitInfo

MAX_DIFF_LINES = 50
TRUNCATION_MARKER = "... (truncated)"
MAX_DESCRIPTION_CHARS = 50

COMMIT_TYPES_ZH = {
    "feat": "新功能",
    "fix": "修复bug",
    "docs": "文档变更",
    "style": "代码格式化",
    "refactor": "重构",
    "test": "测试相关",
    "chore": "其他杂项",
}

_SYSTEM_EN = """\
You are a professional Git commit message generator. Your task is to:

1. Analyze code changes
2. Understand the purpose and impact of changes
3. Generate concise, accurate commit messages
4. Follow best practices and conventions

Requirements:
- Commit messages should be concise and clear
- Use {language}
- Avoid excessive technical details
- Highlight the main purpose of changes
- Maintain consistent style"""

_SYSTEM_ZH = """\
你是一个专业的Git提交信息生成助手。你的任务是：

1. 分析代码变更内容
2. 理解变更的目的和影响
3. 生成简洁、准确的提交信息
4. 遵循最佳实践和约定

要求：
- 提交信息要简洁明了
- 使用{language}
- 避免技术细节过多
- 突出变更的主要目的
- 保持一致的风格"""

_USER_EN = {
    "intro": "Please analyze the following Git changes and generate an "
    "appropriate commit message:",
    "stats": "**Change Statistics:**",
    "files_changed": "- Files changed: {}",
    "additions": "- Lines added: {}",
    "deletions": "- Lines deleted: {}",
    "files": "**Changed Files:**",
    "type": "**Change Type:** {}",
    "scope": "**Scope:** {}",
    "no_scope": "none",
    "history": "**Recent Commit History:**",
    "diff": "**Code Diff:**",
    "ask": "Please generate a clear, concise commit message in {}.",
    "conventional": "Please follow Conventional Commits format:",
    "format": "- Format: type(scope): description",
    "types": "- Type can be: {}",
    "length": "- Description should be concise, no more than {} characters",
    "describe_in": "- Use {} for description",
    "strict": "Please strictly follow Conventional Commits format:",
}

_USER_ZH = {
    "intro": "请分析以下Git变更并生成合适的提交信息：",
    "stats": "**变更统计:**",
    "files_changed": "- 文件数量: {}",
    "additions": "- 新增行数: {}",
    "deletions": "- 删除行数: {}",
    "files": "**变更文件:**",
    "type": "**变更类型:** {}",
    "scope": "**作用域:** {}",
    "no_scope": "无",
    "history": "**最近提交历史:**",
    "diff": "**代码差异:**",
    "ask": "请用{}生成一个清晰、简洁的提交信息。",
    "conventional": "请遵循Conventional Commits规范:",
    "format": "- 格式: type(scope): description",
    "types": "- type可以是: {}",
    "length": "- 描述要简洁明了，不超过{}个字符",
    "describe_in": "- 请使用{}描述",
    "strict": "请严格遵循Conventional Commits规范：",
}


def is_chinese(config: Config) -> bool:
    return config.language == "zh-CN"


def language_name(config: Config) -> str:
    return "中文" if is_chinese(config) else "English"


def truncate_diff(diff: str, max_lines: int = MAX_DIFF_LINES) -> str:
    """Keep the first ``max_lines`` lines and append a marker line if cut."""
    if not diff:
        return ""
    lines = diff.split("\n")
    if len(lines) <= max_lines:
        return diff
    return "\n".join(lines[:max_lines] + [TRUNCATION_MARKER])


def build_system_prompt(config: Config) -> str:
    chinese = is_chinese(config)
    template = _SYSTEM_ZH if chinese else _SYSTEM_EN
    text = _USER_ZH if chinese else _USER_EN
    system_lines = [template.format(language=language_name(config))]
    if config.style == "conventional":
        descriptions = COMMIT_TYPES_ZH if chinese else COMMIT_TYPES
        system_lines.extend(["", text["strict"]])
        system_lines.extend(
            f"- {name}: {description}" for name, description in descriptions.items()
        )
    return "\n".join(system_lines)


def build_user_prompt(
    diff: str,
    analysis: ChangeAnalysis,
    recent_commits: Sequence[CommitInfo],
    config: Config,
) -> str:
    language = language_name(config)
    text = _USER_ZH if is_chinese(config) else _USER_EN
    stats = analysis.stats
    prompt_parts = [
        text["intro"],
        "",
        text["stats"],
        text["files_changed"].format(stats.files_changed),
        text["additions"].format(stats.additions),
        text["deletions"].format(stats.deletions),
        "",
        text["files"],
        *(f"- {path}" for path in analysis.files),
        "",
        text["type"].format(analysis.type),
        text["scope"].format(analysis.scope or text["no_scope"]),
        "",
        text["history"],
        *(f"- {commit.message}" for commit in recent_commits),
        "",
        text["diff"],
        "```diff",
        truncate_diff(diff),
        "```",
        "",
        text["ask"].format(language),
    ]
    if config.style == "conventional":
        prompt_parts.extend(
            [
                "",
                text["conventional"],
                text["format"],
                text["types"].format(", ".join(COMMIT_TYPES)),
                text["length"].format(MAX_DESCRIPTION_CHARS),
                text["describe_in"].format(language),
            ]
        )
    return "\n".join(prompt_parts)


def build_messages(
    diff: str,
    analysis: ChangeAnalysis,
    recent_commits: Sequence[CommitInfo],
    config: Config,
) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": build_system_prompt(config)},
        {
            "role": "user",
            "content": build_user_prompt(diff, analysis, recent_commits, config),
        },
    ]
