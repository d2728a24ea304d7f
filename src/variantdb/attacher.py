"""Write decomposed annotations as symbol, feature and annotation nodes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from variantdb.annotations import AnnotationRecord
from variantdb.config import GraphSchema
from variantdb.storage.base import GraphStore, NodeHandle


@dataclass
class AttachmentCounts:
    annotations: int = 0
    symbols: int = 0
    features: int = 0
    consequence_edges: int = 0


class AnnotationAttacher:
    """Attach annotation records to a variant node.

    Symbol and Feature nodes are matched or created through the store's own
    identity constraints and are shared across variants. Each record gets its
    own Annotation node.
    """

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    def attach(self, variant_node: NodeHandle, records: Iterable[AnnotationRecord]) -> AttachmentCounts:
        counts = AttachmentCounts()
        for record in records:
            self._attach_one(variant_node, record, counts)
        return counts

    def _attach_one(self, variant_node: NodeHandle, record: AnnotationRecord, counts: AttachmentCounts) -> None:
        symbol_node = self._symbol(variant_node, record)
        feature_node = self._feature(record)
        if symbol_node is not None:
            counts.symbols += 1
        if feature_node is not None:
            counts.features += 1

        annotation_node = self.store.create_node([GraphSchema.ANNOTATION], self.annotation_properties(record))
        counts.annotations += 1

        if record.consequences:
            for consequence in record.consequences:
                self.store.create_relationship(
                    variant_node,
                    annotation_node,
                    GraphSchema.consequence_relationship(consequence),
                )
                counts.consequence_edges += 1
        else:
            self.store.create_relationship(variant_node, annotation_node, GraphSchema.HAS_UNKNOWN_CONSEQUENCE)
            counts.consequence_edges += 1

        if feature_node is not None:
            self.store.create_relationship(annotation_node, feature_node, GraphSchema.HAS_IN_FEATURE)

        if symbol_node is not None and feature_node is not None and record.biotype:
            self.store.create_relationship(
                symbol_node,
                feature_node,
                GraphSchema.biotype_relationship(record.biotype),
            )

    def _symbol(self, variant_node: NodeHandle, record: AnnotationRecord) -> NodeHandle | None:
        if not record.symbol:
            return None

        symbol_node = self.store.match_or_create(GraphSchema.SYMBOL, GraphSchema.SYMBOL_ID, record.symbol)
        if record.gene:
            self.store.set_properties(symbol_node, {"GeneId": record.gene})
        self.store.create_relationship(variant_node, symbol_node, GraphSchema.HAS_IN_SYMBOL)
        return symbol_node

    def _feature(self, record: AnnotationRecord) -> NodeHandle | None:
        if not record.feature:
            return None

        feature_node = self.store.match_or_create(GraphSchema.FEATURE, GraphSchema.FEATURE_ID, record.feature)
        self.store.set_properties(feature_node, self.feature_properties(record))
        if record.canonical:
            self.store.add_label(feature_node, GraphSchema.CANONICAL)
        return feature_node

    @staticmethod
    def feature_properties(record: AnnotationRecord) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "FeatureType": record.feature_type,
            "CCDSId": record.ccds,
            "TotalExons": record.total_exons,
        }
        if record.strand == 1:
            properties["Strand"] = True
        elif record.strand == -1:
            properties["Strand"] = False
        return {key: value for key, value in properties.items() if value is not None}

    @staticmethod
    def annotation_properties(record: AnnotationRecord) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "HGVSc": record.hgvs_coding,
            "HGVSp": record.hgvs_protein,
            "Exon": record.exon_number,
            "Intron": record.intron_number,
            "Sift": record.sift,
            "Polyphen": record.polyphen,
            "Codons": record.codons,
        }
        properties.update(record.merged_domains())
        return {key: value for key, value in properties.items() if value is not None}
