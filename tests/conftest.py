import sys
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sni_struct.core.data_models import (
    ConcreteSpecification,
    ImportanceCategory,
    ProjectData,
    ProjectInfo,
    ProjectLoads,
    ProjectMaterials,
    ProjectType,
    SeismicParameters,
    SeismicZone,
    SiteClass,
    SteelSpecification,
    StructuralGeometry,
    ValidationContext,
)


def build_project(
    fc: float = 30.0,
    density: float = 2400.0,
    concrete_certificate: str = "LAB-2024-001",
    fy: float = 400.0,
    fu: float = 550.0,
    grade: str = "BjTS-40",
    steel_certificate: str = "MILL-2024-001",
    length: float = 30.0,
    width: float = 20.0,
    height: float = 32.0,
    number_of_floors: int = 8,
    bay_spacing_x: float = 6.0,
    bay_spacing_y: float = 6.0,
    dead_load: float = 5.0,
    live_load: float = 4.0,
    occupancy_type: str = "office",
    ss: float = 0.8,
    s1: float = 0.3,
    site_class: Any = SiteClass.SD,
    location: str = "Bandung, West Java",
    name: str = "Office Tower A",
) -> ProjectData:
    """Scenario A office building; keyword overrides produce variants."""
    return ProjectData(
        project_info=ProjectInfo(name=name, location=location),
        materials=ProjectMaterials(
            concrete=ConcreteSpecification(fc=fc, density=density,
                                           test_certificate=concrete_certificate),
            steel=SteelSpecification(fy=fy, fu=fu, grade=grade,
                                     test_certificate=steel_certificate),
        ),
        geometry=StructuralGeometry(
            length=length,
            width=width,
            height=height,
            number_of_floors=number_of_floors,
            bay_spacing_x=bay_spacing_x,
            bay_spacing_y=bay_spacing_y,
        ),
        loads=ProjectLoads(
            dead_load=dead_load,
            live_load=live_load,
            occupancy_type=occupancy_type,
            seismic=SeismicParameters(ss=ss, s1=s1, site_class=site_class),
        ),
    )


def build_context(**overrides: Any) -> ValidationContext:
    values = dict(
        project_type=ProjectType.COMMERCIAL,
        seismic_zone=SeismicZone.MODERATE,
        importance_category=ImportanceCategory.II,
        engineer_license="HAKI-STR-2024-0042",
        project_value=500_000.0,
        occupancy=80,
    )
    values.update(overrides)
    return ValidationContext(**values)


@pytest.fixture
def project_factory() -> Callable[..., ProjectData]:
    return build_project


@pytest.fixture
def context_factory() -> Callable[..., ValidationContext]:
    return build_context


@pytest.fixture
def scenario_a_project() -> ProjectData:
    """Well-specified office building with certificates and a licensed engineer."""
    return build_project()


@pytest.fixture
def scenario_a_context() -> ValidationContext:
    return build_context()


@pytest.fixture
def scenario_b_project() -> ProjectData:
    """Under-strength materials, slender plan and extreme hazard."""
    return build_project(
        fc=10.0,
        fy=180.0,
        fu=200.0,
        grade="",
        length=50.0,
        width=8.0,
        ss=3.5,
        s1=0.5,
    )


@pytest.fixture
def scenario_b_context() -> ValidationContext:
    return build_context(engineer_license="")


@pytest.fixture
def analysis_inputs(scenario_a_project):
    """(geometry, materials, loads) of Scenario A"""
    return scenario_a_project.to_analysis_inputs()
