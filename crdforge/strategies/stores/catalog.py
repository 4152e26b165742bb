"""Built-in template catalog.

Hand-written templates for common workload and storage kinds. Every store
lists these first, ahead of parsed or imported templates.
"""

from crdforge.interfaces.schema import FieldDefinition, TemplateDefinition


def _field(path: str, value: str = "", description: str = "", type: str | None = None) -> FieldDefinition:
    return FieldDefinition(path=path, value=value, description=description, type=type)


BUILTIN_TEMPLATES: tuple[TemplateDefinition, ...] = (
    TemplateDefinition(
        id="deployment",
        title="Deployment",
        api_version="apps/v1",
        kind="Deployment",
        note="Progressive delivery for stateless workloads with rollout controls.",
        default_fields=[
            _field("metadata.name", "web-app", "Unique deployment name."),
            _field("metadata.namespace", "default", "Target namespace."),
            _field("spec.replicas", "3", "Desired replica count.", "number"),
            _field("spec.selector.matchLabels.app", "web-app", "Pod label selector."),
            _field("spec.template.spec.containers[0].name", "app", "Container name."),
            _field("spec.template.spec.containers[0].image", "nginx:1.27", "Container image."),
        ],
        optional_fields=[
            _field("spec.strategy.type", description="Deployment strategy type."),
            _field(
                "spec.template.spec.containers[0].ports[0].containerPort",
                description="Exposed container port.",
                type="number",
            ),
            _field("spec.template.spec.imagePullSecrets[0].name", description="Image pull secret."),
        ],
    ),
    TemplateDefinition(
        id="statefulset",
        title="StatefulSet",
        api_version="apps/v1",
        kind="StatefulSet",
        note="Stable identity and storage for stateful workloads.",
        default_fields=[
            _field("metadata.name", "db", "StatefulSet name."),
            _field("metadata.namespace", "default", "Target namespace."),
            _field("spec.serviceName", "db-headless", "Headless service name."),
            _field("spec.replicas", "2", "Replica count.", "number"),
            _field("spec.template.spec.containers[0].name", "postgres", "Container name."),
            _field("spec.template.spec.containers[0].image", "postgres:17", "Container image."),
        ],
        optional_fields=[
            _field("spec.volumeClaimTemplates[0].metadata.name", description="PVC template name."),
            _field(
                "spec.volumeClaimTemplates[0].spec.resources.requests.storage",
                description="Per-pod requested storage.",
            ),
            _field("spec.persistentVolumeClaimRetentionPolicy.whenDeleted", description="PVC retention policy."),
        ],
    ),
    TemplateDefinition(
        id="pvc",
        title="PVC",
        api_version="v1",
        kind="PersistentVolumeClaim",
        note="Declarative persistent storage request with class and size.",
        default_fields=[
            _field("metadata.name", "app-data", "PVC name."),
            _field("metadata.namespace", "default", "Target namespace."),
            _field("spec.accessModes[0]", "ReadWriteOnce", "Access mode."),
            _field("spec.storageClassName", "standard", "StorageClass name."),
            _field("spec.resources.requests.storage", "20Gi", "Requested size."),
        ],
        optional_fields=[
            _field("spec.volumeMode", description="Filesystem or Block mode."),
            _field("spec.dataSource.name", description="Snapshot/PVC data source."),
            _field("spec.selector.matchLabels.tier", description="PV selector label."),
        ],
    ),
    TemplateDefinition(
        id="volumesnapshot",
        title="VolumeSnapshot",
        api_version="snapshot.storage.k8s.io/v1",
        kind="VolumeSnapshot",
        note="Point-in-time snapshots for backup and restore.",
        default_fields=[
            _field("metadata.name", "db-snapshot-001", "Snapshot name."),
            _field("metadata.namespace", "default", "Target namespace."),
            _field("spec.volumeSnapshotClassName", "csi-hostpath-snapclass", "Snapshot class."),
            _field("spec.source.persistentVolumeClaimName", "db-data", "Source PVC."),
        ],
        optional_fields=[
            _field("metadata.labels.backup", description="Backup retention label."),
            _field("metadata.annotations.purpose", description="Snapshot purpose annotation."),
            _field("spec.source.volumeSnapshotContentName", description="Pre-provisioned snapshot content."),
        ],
    ),
    TemplateDefinition(
        id="cronjob",
        title="CronJob",
        api_version="batch/v1",
        kind="CronJob",
        note="Scheduled Kubernetes jobs with retry controls.",
        default_fields=[
            _field("metadata.name", "nightly-report", "CronJob name."),
            _field("metadata.namespace", "default", "Target namespace."),
            _field("spec.schedule", "0 2 * * *", "Cron schedule expression."),
            _field("spec.jobTemplate.spec.template.spec.containers[0].name", "runner", "Container name."),
            _field("spec.jobTemplate.spec.template.spec.containers[0].image", "alpine:3.21", "Container image."),
            _field("spec.jobTemplate.spec.template.spec.restartPolicy", "OnFailure", "Restart behavior."),
        ],
        optional_fields=[
            _field("spec.concurrencyPolicy", description="Concurrency handling."),
            _field("spec.successfulJobsHistoryLimit", description="Successful job history length.", type="number"),
            _field("spec.failedJobsHistoryLimit", description="Failed job history length.", type="number"),
        ],
    ),
)

BUILTIN_TEMPLATE_IDS = frozenset(template.id for template in BUILTIN_TEMPLATES)


def builtin_templates() -> list[TemplateDefinition]:
    """Return deep copies of the built-in templates."""
    return [template.model_copy(deep=True) for template in BUILTIN_TEMPLATES]

