"""Composable variant import orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from variantdb.adapters.base import CallFileAdapter
from variantdb.annotations import VEP_V82_FIELDS, AnnotationDecomposer
from variantdb.attacher import AnnotationAttacher
from variantdb.config import GraphSchema, ImportProfile
from variantdb.enrichment import VariantAttributeExtractor
from variantdb.errors import MalformedGenotype, MissingAnnotationTarget, MissingRunInfo, UnknownInheritance
from variantdb.genotypes import (
    Fatal,
    FatalKind,
    HeterozygousCall,
    HeterozygousNonRefCall,
    HomozygousCall,
    Skip,
    SkipReason,
    classify_genotype,
)
from variantdb.models import CallRecord, GenomeVariant, GenotypeCall, RunInfo, Zygosity, canonicalize
from variantdb.publishers.base import Publisher
from variantdb.resolver import ResolutionTier, VariantResolver
from variantdb.session import SessionRegistry
from variantdb.storage.base import GraphStore, NodeHandle

logger = logging.getLogger(__name__)


@dataclass
class ImportRunReport:
    """Execution summary for a genotype import run."""

    records: int = 0
    skipped_records: int = 0
    genotypes: int = 0
    skipped_genotypes: dict[str, int] = field(default_factory=dict)
    genotype_edges: int = 0
    session_hits: int = 0
    store_hits: int = 0
    created_variants: int = 0
    runs: int = 0
    new_variants: list[GenomeVariant] = field(default_factory=list)


@dataclass
class AnnotationRunReport:
    """Execution summary for an annotation import run."""

    records: int = 0
    annotations: int = 0
    consequence_edges: int = 0
    dbsnp_ids: int = 0


class VariantImportPipeline:
    """Register runs, resolve genotypes, attach annotations and publish, in order.

    Every call to :meth:`import_genotypes` owns a fresh
    :class:`~variantdb.session.SessionRegistry`; nothing carries over between
    runs except what the store persisted.
    """

    def __init__(
        self,
        *,
        store: GraphStore,
        profile: ImportProfile | None = None,
        resolver: VariantResolver | None = None,
        attacher: AnnotationAttacher | None = None,
        extractor: VariantAttributeExtractor | None = None,
        publishers: list[Publisher] | None = None,
    ) -> None:
        self.store = store
        self.profile = profile or ImportProfile()
        self.resolver = resolver or VariantResolver(store, cache_store_hits=self.profile.cache_store_hits)
        self.attacher = attacher or AnnotationAttacher(store)
        self.extractor = extractor or VariantAttributeExtractor(self.profile)
        self.publishers = publishers or []

    def import_genotypes(self, adapter: CallFileAdapter) -> ImportRunReport:
        session = SessionRegistry()
        report = ImportRunReport()

        logger.info("Adding sample and run info nodes ...")
        for run in adapter.samples():
            self.register_run(session, run)
            report.runs += 1

        logger.info("Importing variants ...")
        for record in adapter.read():
            report.records += 1
            if record.is_filtered or not record.is_variant:
                report.skipped_records += 1
                continue
            for genotype in record.genotypes:
                report.genotypes += 1
                self._import_genotype(session, record, genotype, report)

        report.new_variants = list(session.new_variants())
        report.created_variants = len(report.new_variants)
        logger.info(
            "Variant import complete: records=%d genotypes=%d created=%d session_hits=%d store_hits=%d",
            report.records,
            report.genotypes,
            report.created_variants,
            report.session_hits,
            report.store_hits,
        )

        for publisher in self.publishers:
            publisher.publish(report.new_variants)

        return report

    def register_run(self, session: SessionRegistry, run: RunInfo) -> NodeHandle:
        """Match or create the Sample and RunInfo nodes for one sample."""

        sample_node = self.store.match_or_create(GraphSchema.SAMPLE, GraphSchema.SAMPLE_ID, run.sample_id)
        if run.tissue is not None:
            self.store.set_properties(sample_node, {"Tissue": run.tissue})

        run_node, created = self.store.match_or_create_with_status(
            GraphSchema.RUN_INFO,
            GraphSchema.ANALYSIS_ID,
            run.analysis_id,
        )
        self.store.set_properties(run_node, run.run_properties())
        if created:
            self.store.create_relationship(sample_node, run_node, GraphSchema.HAS_ANALYSIS)
        else:
            logger.warning("Run %s already present in store; genotypes will be added to it", run.analysis_id)

        session.put_run_info(run.sample_id, run_node)
        return run_node

    def import_annotations(self, adapter: CallFileAdapter) -> AnnotationRunReport:
        report = AnnotationRunReport()
        fields = adapter.annotation_fields(self.profile.annotation_field) or VEP_V82_FIELDS
        decomposer = AnnotationDecomposer(fields, allowed_biotypes=self.profile.allowed_biotypes)

        logger.info("Importing annotations ...")
        for record in adapter.read():
            report.records += 1
            variant_node = self._annotation_target(record)

            if record.variant_id and record.variant_id != ".":
                self.store.set_properties(variant_node, {"dbSNPId": record.variant_id})
                report.dbsnp_ids += 1

            annotations = decomposer.decompose(record.info.get(self.profile.annotation_field))
            counts = self.attacher.attach(variant_node, annotations)
            report.annotations += counts.annotations
            report.consequence_edges += counts.consequence_edges

            attributes = self.extractor.population_frequencies(record.info)
            attributes.update(self.extractor.conservation_scores(record.info))
            self.store.set_properties(variant_node, attributes)

        return report

    def _annotation_target(self, record: CallRecord) -> NodeHandle:
        if not record.alternates:
            raise MissingAnnotationTarget(f"{record.contig}:{record.position}{record.reference}>")

        variant = canonicalize(record.contig, record.position, record.reference, record.alternates[0])
        nodes = self.store.find_nodes(GraphSchema.VARIANT, GraphSchema.VARIANT_ID, variant.concatenated_id)
        if not nodes:
            raise MissingAnnotationTarget(variant.concatenated_id)
        return nodes[0]

    def _import_genotype(
        self,
        session: SessionRegistry,
        record: CallRecord,
        genotype: GenotypeCall,
        report: ImportRunReport,
    ) -> None:
        outcome = classify_genotype(record, genotype)

        if isinstance(outcome, Skip):
            if outcome.reason is SkipReason.MIXED:
                logger.warning(
                    "%s: %s has mixed genotype ( %s ) and could not be added.",
                    genotype.sample,
                    record.locus(),
                    genotype.genotype_string(),
                )
            key = outcome.reason.value
            report.skipped_genotypes[key] = report.skipped_genotypes.get(key, 0) + 1
            return

        if isinstance(outcome, Fatal):
            if outcome.kind is FatalKind.MALFORMED:
                raise MalformedGenotype(
                    outcome.message,
                    contig=record.contig,
                    position=record.position,
                    sample=genotype.sample,
                )
            raise UnknownInheritance(
                outcome.message,
                contig=record.contig,
                position=record.position,
                sample=genotype.sample,
            )

        run_node = session.get_run_info(genotype.sample)
        if run_node is None:
            raise MissingRunInfo(genotype.sample)

        if isinstance(outcome, HomozygousCall):
            observations = [(outcome.variant, Zygosity.HOMOZYGOUS)]
        elif isinstance(outcome, HeterozygousCall):
            observations = [(outcome.variant, Zygosity.HETEROZYGOUS)]
        elif isinstance(outcome, HeterozygousNonRefCall):
            observations = [(variant, Zygosity.HETEROZYGOUS) for variant in outcome.variants]
        else:
            raise TypeError(f"Unhandled genotype outcome: {outcome!r}")

        for variant, zygosity in observations:
            tier = self.resolver.resolve(session, variant, run_node, zygosity, genotype.quality)
            report.genotype_edges += 1
            if tier is ResolutionTier.SESSION:
                report.session_hits += 1
            elif tier is ResolutionTier.STORE:
                report.store_hits += 1
