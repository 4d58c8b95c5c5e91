from __future__ import annotations

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel


# -- document set (ingest boundary) ---------------------------------------


class ConstantDocDTO(BaseModel):
    fullname: str
    type: str
    value: Union[int, float, bool, str]


class FieldDocDTO(BaseModel):
    modifiers: str = ""
    type: str
    name: str
    const_link: Optional[str] = None
    see_also: List[str] = []
    hints: List[str] = []


class MethodDocDTO(BaseModel):
    modifiers: str = ""
    name: str
    parameters: str = ""
    return_type: Optional[str] = None
    constructor: bool = False
    parameter_docs: List[str] = []
    returns_doc: Optional[str] = None
    see_also: List[str] = []
    hints: List[str] = []


class ClassDocDTO(BaseModel):
    name: str
    package: str
    kind: Literal["class", "interface"] = "class"
    fields: Optional[List[FieldDocDTO]] = []
    methods: Optional[List[MethodDocDTO]] = []


# -- snapshot ---------------------------------------------------------------


class SnapshotConstDTO(BaseModel):
    fullname: str
    name: str
    class_name: str
    package: str
    type: str
    value: Union[int, str]
    claimed_by: Optional[str] = None
    synthesized: bool = False


class SnapshotMemberDTO(BaseModel):
    value: int
    const: str
    name: str


class SnapshotEnumDTO(BaseModel):
    class_name: str
    package: str
    name: str
    prefix: List[str] = []
    members: List[SnapshotMemberDTO] = []


class SnapshotFieldDTO(BaseModel):
    name: str
    type: str
    modifiers: List[str] = []
    const: Optional[str] = None
    raw_type: Optional[str] = None
    enum: Optional[str] = None


class SnapshotParameterDTO(BaseModel):
    name: str
    position: int
    type: str
    raw_type: Optional[str] = None
    enum: Optional[str] = None


class SnapshotMethodDTO(BaseModel):
    name: str
    kind: Literal["constructor", "method"]
    modifiers: List[str] = []
    params: List[SnapshotParameterDTO] = []
    return_type: str = "void"
    raw_return_type: Optional[str] = None
    return_enum: Optional[str] = None
    signature: str


class SnapshotClassDTO(BaseModel):
    fullname: str
    package: str
    kind: Literal["class", "interface"] = "class"
    fields: List[SnapshotFieldDTO] = []
    methods: List[SnapshotMethodDTO] = []


class DiagnosticDTO(BaseModel):
    kind: str
    site: str
    message: str


class SnapshotDTO(BaseModel):
    version: int
    packages: List[str]
    consts: List[SnapshotConstDTO] = []
    classes: List[SnapshotClassDTO] = []
    enums: List[SnapshotEnumDTO] = []
    diagnostics: List[DiagnosticDTO] = []


# -- report (consumed by emitters) ------------------------------------------


class EnumMemberDTO(BaseModel):
    value: int
    name: str
    const: str


class EnumDTO(BaseModel):
    fullname: str
    class_name: str
    name: str
    members: List[EnumMemberDTO]


class EnumSiteDTO(BaseModel):
    signature: str
    # 0 is the return value; parameters are 1-based.
    position: int
    enum: str
    overloaded: bool = False


class EnumFieldDTO(BaseModel):
    name: str
    type: str
    enum: str


class ClassReportDTO(BaseModel):
    fullname: str
    sites: List[EnumSiteDTO] = []
    fields: List[EnumFieldDTO] = []


class ReportDTO(BaseModel):
    packages: List[str]
    enums: List[EnumDTO] = []
    classes: List[ClassReportDTO] = []
    stats: Dict[str, int] = {}
    diagnostics: List[DiagnosticDTO] = []
