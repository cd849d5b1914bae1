# package_explorer/models/tree_node.py

from dataclasses import dataclass
from typing import Dict, Optional

@dataclass
class TreeNode:
    """
    Modelo de datos que representa un nodo dentro del sistema de archivos
    virtual de un paquete de aplicación. Puede ser un archivo o un directorio.

    Atributos:
    ----------
    name : str
        Último segmento de la ruta (ej: "music.sd", "schemas").

    path : str
        Ruta relativa a la raíz del recorrido (ej: "schemas/music.sd").
        Los directorios del árbol remoto terminan en "/".

    is_leaf : bool
        True si el nodo es un archivo.

    children : Optional[Dict[str, TreeNode]]
        Hijos indexados por nombre. Siempre presente (aunque vacío) en
        directorios y None en archivos. Un nombre repetido sobrescribe
        al anterior.

    content : Optional[str]
        Contenido textual; sólo lo usan las hojas del árbol construido
        desde un JAR.
    """
    name: str
    path: str
    is_leaf: bool
    children: Optional[Dict[str, "TreeNode"]] = None
    content: Optional[str] = None

    def __post_init__(self):
        if self.is_leaf:
            self.children = None
        elif self.children is None:
            self.children = {}

    @classmethod
    def directory(cls, name: str, path: str) -> "TreeNode":
        return cls(name=name, path=path, is_leaf=False)

    @classmethod
    def leaf(cls, name: str, path: str, content: Optional[str] = None) -> "TreeNode":
        return cls(name=name, path=path, is_leaf=True, content=content)

    def add_child(self, node: "TreeNode") -> "TreeNode":
        if self.is_leaf:
            raise ValueError(f"No se pueden agregar hijos a un archivo: {self.path}")
        self.children[node.name] = node
        return node


@dataclass
class TreeSummary:
    """Árbol sin contenido más los contadores acumulados durante el recorrido."""
    root: TreeNode
    total_files: int = 0
    total_directories: int = 0


@dataclass
class ArchiveFilesystem:
    """Árbol con contenido construido desde un JAR. root es None si la descarga falló."""
    component_archive_name: str
    root: Optional[TreeNode] = None
    total_files: int = 0


@dataclass
class FileContent:
    url: str
    content: str


@dataclass
class PackageOverview:
    generation: str
    services_content: str
    hosts_content: str
    models_content: str
