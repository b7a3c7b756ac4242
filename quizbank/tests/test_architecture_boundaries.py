"""
Pruebas arquitectónicas para verificar límites entre capas de Clean Architecture.

Estas pruebas aseguran que:
1. La capa de dominio no importe de capas externas
2. La capa de aplicación solo dependa de dominio
3. Los repositorios de infraestructura implementen los puertos del dominio
4. Las dependencias fluyan hacia adentro (hacia el dominio)
"""
import ast
import sys
import unittest
from pathlib import Path
from typing import Dict, List, Set


class ArchitectureBoundaryTests(unittest.TestCase):
    """
    Pruebas que verifican los límites arquitectónicos entre capas.
    """

    def setUp(self):
        self.app_path = Path(__file__).parent.parent
        self.domain_path = self.app_path / "domain"
        self.application_path = self.app_path / "application"
        self.infrastructure_path = self.app_path / "infrastructure"
        self.interfaces_path = self.app_path / "interfaces"

    def test_domain_layer_has_no_external_dependencies(self):
        """
        La capa de dominio debe ser independiente de Django/DRF y de las
        capas de aplicación, infraestructura e interfaces.
        """
        forbidden_imports = {
            "django",
            "rest_framework",
            "environ",
            "quizbank.infrastructure",
            "quizbank.interfaces",
            "quizbank.application",
        }

        violations = []
        for file_path in self._get_python_files(self.domain_path):
            for imp in self._extract_imports(file_path):
                if any(imp.startswith(forbidden) for forbidden in forbidden_imports):
                    violations.append(f"{file_path.name}: imports {imp}")

        self.assertEqual([], violations, "Domain layer has forbidden imports:\n" + "\n".join(violations))

    def test_application_layer_only_depends_on_domain(self):
        """
        La capa de aplicación puede importar la biblioteca estándar, el dominio
        y sus propios módulos.
        """
        violations = []
        for file_path in self._get_python_files(self.application_path):
            for imp in self._extract_imports(file_path):
                if imp.startswith("quizbank.domain") or imp.startswith("quizbank.application"):
                    continue
                if imp.split(".")[0] in sys.stdlib_module_names:
                    continue
                violations.append(f"{file_path.name}: imports {imp}")

        self.assertEqual([], violations, "Application layer has forbidden imports:\n" + "\n".join(violations))

    def test_repositories_implement_domain_ports(self):
        """Cada repositorio Django debe heredar de un puerto del dominio."""
        domain_ports = self._extract_abstract_classes(self.domain_path / "ports")
        implementations = self._extract_class_bases(self.infrastructure_path / "adapters")

        repositories = {name: bases for name, bases in implementations.items() if name.startswith("Django")}
        self.assertTrue(repositories, "No Django repositories found")

        invalid = [
            f"{name} does not implement a domain port (bases: {bases})"
            for name, bases in repositories.items()
            if not any(base in domain_ports for base in bases)
        ]
        self.assertEqual([], invalid, "\n".join(invalid))

        implemented = {base for bases in repositories.values() for base in bases}
        self.assertEqual(set(), domain_ports - implemented, "Domain ports without implementation")

    def test_dependency_direction_flows_inward(self):
        """
        Orden de dependencias permitido:
        Interfaces -> Application -> Domain
        Infrastructure -> Domain (la factoría de servicios compone la aplicación)
        """
        dependency_violations = []

        for file_path in self._get_python_files(self.interfaces_path):
            for imp in self._extract_imports(file_path):
                if imp.startswith("quizbank.infrastructure.models") or imp.startswith(
                    "quizbank.infrastructure.adapters"
                ):
                    dependency_violations.append(
                        f"Interfaces layer ({file_path.name}) imports persistence details: {imp}"
                    )

        for file_path in self._get_python_files(self.infrastructure_path):
            for imp in self._extract_imports(file_path):
                if imp.startswith("quizbank.interfaces"):
                    dependency_violations.append(
                        f"Infrastructure layer ({file_path.name}) imports from outer layer: {imp}"
                    )
                if imp.startswith("quizbank.application") and file_path.name != "factories.py":
                    dependency_violations.append(
                        f"Infrastructure layer ({file_path.name}) imports application: {imp}"
                    )

        self.assertEqual(
            [], dependency_violations, "Dependency direction violations:\n" + "\n".join(dependency_violations)
        )

    # Helper methods

    def _get_python_files(self, directory: Path) -> List[Path]:
        if not directory.exists():
            return []
        return [p for p in directory.rglob("*.py") if p.name != "__init__.py"]

    def _parse(self, file_path: Path) -> ast.AST:
        return ast.parse(file_path.read_text(encoding="utf-8"))

    def _extract_imports(self, file_path: Path) -> Set[str]:
        """Extrae todos los imports de un archivo Python (incluidos los diferidos)."""
        imports = set()
        for node in ast.walk(self._parse(file_path)):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    imports.add(alias.name)
            elif isinstance(node, ast.ImportFrom) and node.module:
                imports.add(node.module)
        return imports

    def _extract_abstract_classes(self, directory: Path) -> Set[str]:
        names = set()
        for file_path in self._get_python_files(directory):
            for node in ast.walk(self._parse(file_path)):
                if isinstance(node, ast.ClassDef) and any(self._base_name(b) == "ABC" for b in node.bases):
                    names.add(node.name)
        return names

    def _extract_class_bases(self, directory: Path) -> Dict[str, List[str]]:
        implementations = {}
        for file_path in self._get_python_files(directory):
            for node in ast.walk(self._parse(file_path)):
                if isinstance(node, ast.ClassDef):
                    implementations[node.name] = [self._base_name(b) for b in node.bases]
        return implementations

    @staticmethod
    def _base_name(base: ast.expr) -> str:
        if isinstance(base, ast.Name):
            return base.id
        if isinstance(base, ast.Attribute):
            return base.attr
        return ""


if __name__ == "__main__":
    unittest.main()
