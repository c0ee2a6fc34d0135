# -*- coding: utf-8 -*-
"""Resources API
---------------
- GET /resources              : every category of the support directory
- GET /resources/{category}   : one category (404 when unknown)

The directory is static reference data shipped with the app. Phone-only
entries (crisis lines) carry ``phone`` and no ``url``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel


@dataclass(frozen=True)
class Resource:
    name: str
    type: str
    description: str
    location: str
    url: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class ResourceCategory:
    id: str
    title: str
    icon: str
    resources: Tuple[Resource, ...]


RESOURCE_CATEGORIES: Tuple[ResourceCategory, ...] = (
    ResourceCategory("healthcare", "Healthcare", "medical", (
        Resource("WPATH Standards of Care", "Guidelines",
                 "International standards for transgender healthcare", "Global", url="https://www.wpath.org"),
        Resource("Planned Parenthood", "Healthcare Provider",
                 "Hormone therapy and trans-affirming care", "USA", url="https://www.plannedparenthood.org"),
        Resource("Fenway Health", "Specialized Clinic",
                 "LGBTQ+ specialized healthcare", "Boston, MA", url="https://fenwayhealth.org"),
        Resource("Howard Brown Health", "Specialized Clinic",
                 "Comprehensive LGBTQ+ healthcare", "Chicago, IL", url="https://howardbrown.org"),
    )),
    ResourceCategory("mental_health", "Mental Health", "heart", (
        Resource("Trans Lifeline", "Crisis Support",
                 "24/7 crisis hotline by and for trans people", "USA", phone="877-565-8860"),
        Resource("Psychology Today", "Therapist Directory",
                 "Find LGBTQ+ affirming therapists", "Global", url="https://www.psychologytoday.com"),
        Resource("The Trevor Project", "Crisis Support",
                 "LGBTQ+ youth crisis intervention", "USA", phone="1-866-488-7386"),
    )),
    ResourceCategory("community", "Community", "people", (
        Resource("PFLAG", "Support Organization",
                 "Support for LGBTQ+ individuals and families", "USA", url="https://pflag.org"),
        Resource("GLAAD", "Advocacy",
                 "Media advocacy and education", "USA", url="https://www.glaad.org"),
        Resource("Reddit r/transgender", "Online Community",
                 "Large online support community", "Online", url="https://reddit.com/r/transgender"),
        Resource("TransHub", "Information Hub",
                 "Comprehensive trans resource website", "Australia", url="https://www.transhub.org.au"),
    )),
    ResourceCategory("legal", "Legal Resources", "document-text", (
        Resource("Lambda Legal", "Legal Aid",
                 "LGBTQ+ legal advocacy and support", "USA", url="https://www.lambdalegal.org"),
        Resource("ACLU LGBTQ+ Rights", "Civil Rights",
                 "Civil liberties and rights advocacy", "USA", url="https://www.aclu.org/issues/lgbt-rights"),
        Resource("National Center for Transgender Equality", "Advocacy",
                 "Policy advocacy and legal resources", "USA", url="https://transequality.org"),
    )),
    ResourceCategory("education", "Education & Research", "library", (
        Resource("UCSF Transgender Care", "Medical Guidelines",
                 "Evidence-based treatment guidelines", "Online", url="https://transcare.ucsf.edu"),
        Resource("Gender Dysphoria Bible", "Educational Resource",
                 "Comprehensive guide to gender dysphoria", "Online", url="https://genderdysphoria.fyi"),
        Resource("Trans Research Network", "Research Hub",
                 "Latest research on transgender health", "Online", url="https://www.transresearchnetwork.org"),
    )),
)


# ---------- Models ----------

class ResourceOut(BaseModel):
    name: str
    type: str
    description: str
    location: str
    url: Optional[str] = None
    phone: Optional[str] = None


class ResourceCategoryOut(BaseModel):
    id: str
    title: str
    icon: str
    resources: List[ResourceOut]


def _category_out(c: ResourceCategory) -> ResourceCategoryOut:
    return ResourceCategoryOut(
        id=c.id,
        title=c.title,
        icon=c.icon,
        resources=[ResourceOut(**asdict(r)) for r in c.resources],
    )


def register_resources_routes(app: FastAPI) -> None:
    by_id = {c.id: c for c in RESOURCE_CATEGORIES}

    @app.get("/resources", response_model=List[ResourceCategoryOut])
    async def list_resources() -> List[ResourceCategoryOut]:
        return [_category_out(c) for c in RESOURCE_CATEGORIES]

    @app.get("/resources/{category}", response_model=ResourceCategoryOut)
    async def get_resource_category(category: str) -> ResourceCategoryOut:
        c = by_id.get(category)
        if c is None:
            raise HTTPException(status_code=404, detail=f"Unknown resource category: {category}")
        return _category_out(c)
