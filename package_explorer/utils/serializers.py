from typing import Any, Dict, Optional

from package_explorer.models.tree_node import (
    TreeNode,
    TreeSummary,
    ArchiveFilesystem,
    FileContent,
    PackageOverview
)


def serialize_node(node: Optional[TreeNode]) -> Optional[Dict[str, Any]]:
    """
    Convierte recursivamente un TreeNode a dict serializable en JSON.

    Las claves siguen el contrato del cliente web (camelCase); los
    directorios siempre llevan 'children' y las hojas nunca.
    """
    if node is None:
        return None

    serialized: Dict[str, Any] = {
        "name": node.name,
        "path": node.path,
        "isLeaf": node.is_leaf,
    }
    if node.is_leaf:
        if node.content is not None:
            serialized["content"] = node.content
    else:
        serialized["children"] = {
            name: serialize_node(child) for name, child in node.children.items()
        }
    return serialized


def serialize_tree_summary(summary: TreeSummary) -> Dict[str, Any]:
    return {
        "root": serialize_node(summary.root),
        "totalFiles": summary.total_files,
        "totalDirectories": summary.total_directories
    }


def serialize_archive_filesystem(filesystem: ArchiveFilesystem) -> Dict[str, Any]:
    return {
        "componentArchiveName": filesystem.component_archive_name,
        "root": serialize_node(filesystem.root),
        "totalFiles": filesystem.total_files
    }


def serialize_file_content(file_content: FileContent) -> Dict[str, str]:
    return {"url": file_content.url, "content": file_content.content}


def serialize_overview(overview: PackageOverview) -> Dict[str, str]:
    return {
        "generation": overview.generation,
        "servicesContent": overview.services_content,
        "hostsContent": overview.hosts_content,
        "modelsContent": overview.models_content
    }
