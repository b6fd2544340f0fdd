import pytest

from certintel.matching.classes import TrainingClass
from certintel.matching.names import Person
from certintel.repos.class_catalog.read import InMemoryClassCatalogReadRepo
from certintel.repos.directory.read import InMemoryDirectoryReadRepo

EVOC_CERTIFICATE = (
    "MARYLAND FIRE AND RESCUE INSTITUTE\n"
    "THIS CERTIFICATE AWARDED TO\n"
    "Jane A. Doe\n"
    "HAS PASSED ALL COURSE WORK IN\n"
    "Emergency Vehicle Operations\n"
    "(12.0 Hours)\n"
    "LOG NUMBER EVOC-24-0091\n"
)


@pytest.fixture
def people():
    return [
        Person(id="u1", display_name="Rob Jones", first_name="Robert", last_name="Jones", email="rjones@example.org"),
        Person(id="u2", display_name="Alice Jones", first_name="Alice", last_name="Jones"),
        Person(id="u3", display_name="Robbie Jones", first_name="Robbie", last_name="Jones"),
        Person(id="u4", display_name="Jane Doe", first_name="Jane", middle_name="Anne", last_name="Doe"),
    ]


@pytest.fixture
def directory(people):
    return InMemoryDirectoryReadRepo(people)


@pytest.fixture
def catalog():
    return InMemoryClassCatalogReadRepo(
        [
            TrainingClass(id="c1", title="Emergency Vehicle Operations", course_id="EVOC-101"),
            TrainingClass(id="c2", title="Hazardous Materials Operations", course_id="HMO-200"),
            TrainingClass(id="c3", title="Firefighter I", course_id=None),
        ]
    )


@pytest.fixture
def evoc_text():
    return EVOC_CERTIFICATE
