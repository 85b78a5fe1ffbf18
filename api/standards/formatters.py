"""Markdown and JSON rendering of query and mutation results

Pure functions of the result data; nothing here touches the index.
"""
import json
from typing import Dict, List, Sequence

from domain_models import Metadata, Standard
from value_objects import IndexEntry, ResponseFormat, SearchResult


def _is_json(response_format) -> bool:
    return ResponseFormat(response_format) is ResponseFormat.JSON


def _dumps(data) -> str:
    return json.dumps(data, indent=2)


def _tags(metadata: Metadata) -> str:
    return ', '.join(metadata.tags)


def format_standard(standard: Standard, response_format=ResponseFormat.MARKDOWN) -> str:
    if _is_json(response_format):
        return _dumps(standard.to_dict())
    return _standard_markdown(standard)


def _standard_markdown(standard: Standard) -> str:
    metadata = standard.metadata
    return (
        f"# Standard: {standard.path}\n"
        f"\n"
        f"## Metadata\n"
        f"- **Type**: {metadata.type}\n"
        f"- **Tier**: {metadata.tier}\n"
        f"- **Process**: {metadata.process}\n"
        f"- **Tags**: {_tags(metadata)}\n"
        f"- **Version**: {metadata.version}\n"
        f"- **Status**: {metadata.status}\n"
        f"- **Author**: {metadata.author}\n"
        f"- **Created**: {metadata.created.isoformat()}\n"
        f"- **Last Updated**: {metadata.updated.isoformat()}\n"
        f"\n"
        f"## Content\n"
        f"\n"
        f"{standard.content}\n"
    )


def format_standards(standards: Sequence[Standard], response_format=ResponseFormat.MARKDOWN) -> str:
    if _is_json(response_format):
        return _dumps([standard.to_dict() for standard in standards])
    if not standards:
        return "No standards found."
    return "\n".join(
        f"{number}. {_standard_markdown(standard)}\n---\n"
        for number, standard in enumerate(standards, start=1)
    )


def format_metadata(entry: IndexEntry, response_format=ResponseFormat.MARKDOWN) -> str:
    if _is_json(response_format):
        return _dumps(entry.to_dict())
    metadata = entry.metadata
    return (
        f"**{entry.path}**\n"
        f"- Type: {metadata.type}\n"
        f"- Tier: {metadata.tier}\n"
        f"- Process: {metadata.process}\n"
        f"- Tags: {_tags(metadata)}\n"
        f"- Version: {metadata.version}\n"
        f"- Status: {metadata.status}\n"
        f"- Author: {metadata.author}\n"
        f"- Updated: {metadata.updated.isoformat()}"
    )


def format_metadata_list(entries: Sequence[IndexEntry], response_format=ResponseFormat.MARKDOWN) -> str:
    if _is_json(response_format):
        return _dumps([entry.to_dict() for entry in entries])
    if not entries:
        return "No standards found."
    return "\n\n".join(format_metadata(entry, response_format) for entry in entries)


def format_search_results(results: Sequence[SearchResult], response_format=ResponseFormat.MARKDOWN) -> str:
    if _is_json(response_format):
        return _dumps([result.to_dict() for result in results])
    if not results:
        return "No results found."

    blocks = []
    for number, result in enumerate(results, start=1):
        metadata = result.standard.metadata
        contexts = "\n".join(f"  > {match.context}" for match in result.matches)
        blocks.append(
            f"{number}. **{result.path}** (score: {result.score:.2f})\n"
            f"   Type: {metadata.type} | Tier: {metadata.tier} | Process: {metadata.process}\n"
            f"   Tags: {_tags(metadata)}\n"
            f"\n"
            f"   Matches ({result.match_count}):\n"
            f"{contexts}\n"
        )
    return "\n".join(blocks)


def hierarchy_to_dict(tree: Dict[str, Dict[str, Dict[str, List[IndexEntry]]]]) -> dict:
    """Plain-data copy of a hierarchical index"""
    return {
        type_name: {
            tier: {
                process: [entry.to_dict() for entry in entries]
                for process, entries in processes.items()
            }
            for tier, processes in tiers.items()
        }
        for type_name, tiers in tree.items()
    }


def count_entries(tree: Dict[str, Dict[str, Dict[str, List[IndexEntry]]]]) -> int:
    return sum(
        len(entries)
        for tiers in tree.values()
        for processes in tiers.values()
        for entries in processes.values()
    )


def format_hierarchical_index(tree: Dict[str, Dict[str, Dict[str, List[IndexEntry]]]],
                              response_format=ResponseFormat.MARKDOWN) -> str:
    total = count_entries(tree)
    if _is_json(response_format):
        return _dumps({'totalCount': total, 'index': hierarchy_to_dict(tree)})
    if total == 0:
        return "No standards found."

    lines = [f"# Standards Index ({total} total)", ""]
    for type_name in sorted(tree):
        lines.append(f"## {type_name}")
        for tier in sorted(tree[type_name]):
            lines.append(f"### {tier}")
            for process in sorted(tree[type_name][tier]):
                lines.append(f"#### {process}")
                for entry in tree[type_name][tier][process]:
                    metadata = entry.metadata
                    lines.append(
                        f"- **{entry.path}** (v{metadata.version}, {metadata.status}) - {_tags(metadata)}"
                    )
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"
