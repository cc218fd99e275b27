"""Fixed example postings, used when the job board cannot be reached or parsed."""
from __future__ import annotations

from cvoptimize.log import get_logger
from cvoptimize.models import JobPosting
from cvoptimize.sources.base import PostingSource

log = get_logger(__name__)

# Snapshot of real portaljob-madagascar.com listings; order is part of the contract.
EXAMPLE_POSTINGS: tuple[JobPosting, ...] = (
    JobPosting(
        title="Responsable Contenu -réf:RC-19-11",
        company="HELLOTANA",
        contract_type="CDD",
        sector="Marketing / Communication",
        date="20 Nov 2025",
        reference="RC-19-11",
    ),
    JobPosting(
        title="Téléconseiller(e) expert(e) en relation client -réf:TE-RC-1125",
        company="HELLOTANA",
        contract_type="CDI",
        sector="Télé-vente / Prospection / Enquête",
        date="20 Nov 2025",
        reference="TE-RC-1125",
    ),
    JobPosting(
        title="COMMERCIAL",
        company="CAPMAD SA",
        contract_type="Free-lance",
        sector="Commercial / Vente",
        date="19 Nov 2025",
    ),
    JobPosting(
        title="UN(E) CHARGE(E) D'ETUDES ECONOMIQUES ET FINANCIERES",
        company="EVOLUTIS PROJECTS DEVELOPMENT",
        contract_type="CDI",
        sector="Gestion / Comptabilité / Finance",
        date="20 Nov 2025",
    ),
    JobPosting(
        title="STAGIAIRE EN ELECTRICITE-réf:25-STG-ELEC-001",
        company="BE",
        contract_type="Stage",
        sector="Ingénierie / industrie / BTP",
        date="20 Nov 2025",
        reference="25-STG-ELEC-001",
    ),
    JobPosting(
        title="GESTIONNAIRE DE PLANNING-réf:GPA1125",
        company="Rouge Hexagone",
        contract_type="CDI",
        sector="Management / RH",
        date="20 Nov 2025",
        reference="GPA1125",
    ),
    JobPosting(
        title="Assistant(e) approvisonement -réf:Assist_appro",
        company="Sitma",
        contract_type="CDI",
        sector="Logistique / Achats",
        date="20 Nov 2025",
        reference="Assist_appro",
    ),
    JobPosting(
        title="STAGIAIRE COMMUNITY MANAGER & PROSPECTION DIGITALE-réf:25-STG/CMPG-003",
        company="BE",
        contract_type="Stage",
        sector="Marketing / Communication",
        date="20 Nov 2025",
        reference="25-STG/CMPG-003",
    ),
    JobPosting(
        title="MAITRE-CHIEN-réf:DHTDC02/25",
        company="Madagascar.hr",
        contract_type="CDD",
        sector="Securité",
        date="20 Nov 2025",
        reference="DHTDC02/25",
    ),
)


class ExampleSource(PostingSource):
    name = "examples"

    def search(self, limit: int = 10) -> list[JobPosting]:
        log.info("Using example postings (limit=%d)", limit)
        return list(EXAMPLE_POSTINGS[: max(limit, 0)])
