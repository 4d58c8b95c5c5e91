"""Package-scoped view of the model for the mapping emitters."""

from __future__ import annotations

import re
from collections import Counter

from jdh2trans.model import ApiModel
from jdh2trans.order_contract import sort_once
from jdh2trans.runtime.stable_encode import stable_text
from jdh2trans.schema import (
    ClassReportDTO,
    DiagnosticDTO,
    EnumDTO,
    EnumFieldDTO,
    EnumMemberDTO,
    EnumSiteDTO,
    ReportDTO,
)

PackageSelector = str | re.Pattern[str] | None


def select_packages(model: ApiModel, selector: PackageSelector) -> list[str]:
    names = sort_once(model.packages, source="select_packages.names")
    if selector is None:
        return names
    if isinstance(selector, re.Pattern):
        return [name for name in names if selector.search(name)]
    return [name for name in names if name == selector]


def build_report(
    model: ApiModel,
    selector: PackageSelector = None,
    *,
    include_diagnostics: bool = False,
) -> ReportDTO:
    packages = select_packages(model, selector)
    wanted = set(packages)

    enums: list[EnumDTO] = []
    for key in sort_once(model.enums, source="build_report.enums"):
        enum = model.enums[key]
        if enum.package not in wanted:
            continue
        enums.append(
            EnumDTO(
                fullname=enum.fullname,
                class_name=enum.class_name,
                name=enum.name,
                members=[
                    EnumMemberDTO(value=value, name=name, const=enum.members[value].const)
                    for value, name in enum.member_pairs()
                ],
            )
        )

    classes: list[ClassReportDTO] = []
    for class_name in sort_once(model.classes, source="build_report.classes"):
        decl = model.classes[class_name]
        if decl.package not in wanted:
            continue
        sites: list[EnumSiteDTO] = []
        for method in decl.all_methods():
            overloaded = decl.name_histogram.get(method.bare_name, 0) > 1
            if method.return_enum is not None:
                sites.append(
                    EnumSiteDTO(
                        signature=method.signature,
                        position=0,
                        enum=method.return_enum,
                        overloaded=overloaded,
                    )
                )
            for param in method.params:
                if param.enum is not None:
                    sites.append(
                        EnumSiteDTO(
                            signature=method.signature,
                            position=param.position,
                            enum=param.enum,
                            overloaded=overloaded,
                        )
                    )
        fields: list[EnumFieldDTO] = []
        for name in sort_once(decl.fields, source="build_report.fields"):
            fld = decl.fields[name]
            if fld.enum is not None:
                fields.append(EnumFieldDTO(name=fld.name, type=fld.type, enum=fld.enum))
        if sites or fields:
            classes.append(ClassReportDTO(fullname=class_name, sites=sites, fields=fields))

    kinds = Counter(diagnostic.kind for diagnostic in model.diagnostics)
    stats = {
        "enums": len(enums),
        "classes": len(classes),
        "sites": sum(len(entry.sites) for entry in classes),
        "fields": sum(len(entry.fields) for entry in classes),
        "diagnostics": len(model.diagnostics),
    }
    for kind in sort_once(kinds, source="build_report.diagnostic_kinds"):
        stats[f"diagnostics.{kind}"] = kinds[kind]

    diagnostics: list[DiagnosticDTO] = []
    if include_diagnostics:
        diagnostics = [
            DiagnosticDTO(kind=item.kind, site=item.site, message=item.message)
            for item in model.diagnostics
        ]
    return ReportDTO(
        packages=packages,
        enums=enums,
        classes=classes,
        stats=stats,
        diagnostics=diagnostics,
    )


def render_report(report: ReportDTO) -> str:
    return stable_text(report.model_dump())
