"""
Sample data model for demonstrations and the command-line default.

Professor and Librarian are exportable; Student is not, so it is written as the
``<notXMLable />`` placeholder unless an export contract registers it.
"""

from dataclasses import dataclass
from typing import List

from .markers import xmlable, xml_field


@xmlable
@dataclass
class Professor:
    first_name: str
    last_name: str = xml_field(type="String")
    age: int = xml_field(type="int", default=0)
    department: str = xml_field(type="String", default="")


@xmlable
@dataclass
class Librarian:
    first_name: str = xml_field(type="String")
    last_name: str = xml_field(type="String")
    age: int = xml_field(type="int", default=0)
    specialization: str = xml_field(type="String", name="degree", default="")


@dataclass
class Student:
    first_name: str
    last_name: str
    age: int = 0


def build_sample_people() -> List[object]:
    """Return the mixed list of people exported by the demo run."""
    return [
        Librarian("John", "Doe", 35, "Library Science"),
        Professor("Prof", "X", 40, "Computer Science"),
        Student("Jane", "Doe", 25),
        Student("John", "Smith", 30),
        Professor("Prof", "Y", 45, "Physics"),
        Librarian("Jane", "Smith", 35, "Library Science"),
    ]


SAMPLE_PEOPLE = build_sample_people()
