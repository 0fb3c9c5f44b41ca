"""
Static learning content: modules, coaching tips, knowledge base and system prompts.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModuleDefinition:
    """One card on the learning path."""

    id: str
    title: str
    description: str
    topics: tuple[str, ...]
    icon: str


DAVID_TIPS: tuple[str, ...] = (
    "Don't just say 'it scales'. Explain HOW. Shards? Replicas? Prove it.",
    "If you can't explain ILM to a CFO, you aren't an SA, you're just a dev.",
    "A 500GB shard is a resume generating event. Keep it 20-50GB.",
    "Never propose Logstash if an Ingest Pipeline can do the job. Keep it simple.",
    "Search relevance isn't magic. It's BM25 + Vector + good mapping.",
    "Always ask: 'Why not just use grep?' If they can't answer, they don't need Elastic.",
    "Heap is precious. Don't waste it on high cardinality fields you don't need.",
    "Data Streams are the future for time-series. Indices are the past.",
    "Splunk is a great product, but Elastic is a platform. Know the difference.",
    "You are not selling software. You are selling a good night's sleep to the CISO.",
)

CORE_KNOWLEDGE_BASE = """
PHASE 1 FOUNDATION KNOWLEDGE (THE TRUTH):

1. WHAT ELASTIC IS (IDENTITY)
Elastic = A distributed data platform optimized for search, logs, metrics, security analytics, and vector/RAG workloads.
It is THREE things:
1) Document Database: JSON, distributed, scalable.
2) Search & Analytics Engine: Full-text, Aggregations, Vector search.
3) Platform (The Stack): Kibana (UI), Beats (Microwave/Shipper), Logstash (Kitchen/ETL), Security (SIEM/XDR), Observability.

2. ANALOGIES (USE THESE EXPLICITLY)
- Cluster: An airport system (ATL + JFK + LAX working together).
- Node: A single airport.
- Index: A giant book.
- Shard: A chapter of that book (distributed across nodes).
- Replica: A photocopy of a chapter (for safety).
- Logstash: A professional kitchen (complex, heavy-duty processing).
- Beats: A microwave (simple, fast, single-purpose).
- Kafka: A giant high-speed buffer/holding area.

3. ARCHITECTURE & SIZING RULES (CRITICAL)
- Node Sizing: Horizontal scaling > Vertical scaling.
- Shard Size: Target 20GB - 50GB per shard.
- Heap Size: NEVER exceed 32GB (Compressed Oops limit). 50% of RAM to Heap.
- Master Nodes: Dedicated master nodes for clusters > 3 nodes.
- ILM (Index Lifecycle Management Cost Control): Hot (SSD) -> Warm (HDD) -> Cold (S3/Snapshots) -> Frozen.

4. INGESTION PIPELINES
- Pipeline 1: Logs -> Beats -> Elasticsearch (Simple)
- Pipeline 2: Logs -> Beats -> Logstash -> Elasticsearch (Transform/Parse)
- Pipeline 3: Apps -> Kafka -> Logstash -> Elasticsearch (High throughput)
- Pipeline 4: Docs -> Vector Pipeline -> Elasticsearch (RAG - Retrieval Augmented Generation)

5. SEARCH & AI
- Lexical: BM25 (text matching).
- Vector: ANN (Approximate Nearest Neighbor).
- Hybrid: BM25 + Vector + Reranking (Best for RAG).

6. THE SA ROLE (PERSONA)
- You are NOT just a techie. You are a business problem solver.
- Discovery: Uncover business drivers ("Why do you need Kafka?").
- Value: "This reduces MTTR (Mean Time To Recovery) by 40%", "This consolidates 4 tools".
- Tone: Switch between IC-Level (technical specs) and Director-Level (business value).
"""

ELASTIC_MODULES: tuple[ModuleDefinition, ...] = (
    ModuleDefinition(
        id="m1",
        title="Why Elastic Exists",
        description="The problem: Unstructured data explosion, speed requirements, and why SQL/Splunk failed.",
        topics=("Data Explosion", "Need for Speed", "Limitations of SQL", "Splunk Cost/Scale Issues"),
        icon="💡",
    ),
    ModuleDefinition(
        id="m2",
        title="Core Solutions",
        description="What Search, Security (SIEM), and Observability actually do.",
        topics=(
            "Search (Vector/BM25)",
            "Security (SIEM/XDR)",
            "Observability (Logs/Metrics/Traces)",
            "RAG Pipelines",
        ),
        icon="🧱",
    ),
    ModuleDefinition(
        id="m3",
        title="Who Uses Elastic?",
        description="Real-world personas: E-commerce, Fintech, SOC Analysts, and DevOps.",
        topics=("E-commerce Search Teams", "SOC Analysts (Security)", "SREs (Observability)", "GenAI Developers"),
        icon="👥",
    ),
    ModuleDefinition(
        id="m4",
        title="How Elastic Works",
        description="The Engine: Clusters, Nodes, Shards, Segments, and ILM.",
        topics=(
            "Cluster = Airport Analogy",
            "Sharding & Replication",
            "Inverted Indices",
            "ILM Tiers (Hot/Warm/Cold)",
        ),
        icon="🖥️",
    ),
    ModuleDefinition(
        id="m5",
        title="Cloud & Integrations",
        description="Deployment models: Elastic Cloud vs On-prem vs Serverless.",
        topics=("Elastic Cloud (SaaS)", "AWS/GCP/Azure Integrations", "Serverless Architecture", "Compliance"),
        icon="☁️",
    ),
)

_TIPS_QUOTED = '", "'.join(DAVID_TIPS)

SYSTEM_INSTRUCTION_BASE = f"""
You are ElasticSense, a world-class Elastic Solutions Architect Tutor and Interview Coach.
Your Goal: Prepare the user for a Senior SA interview at Elastic.

MANDATORY RULES:
1. **ACRONYMS**: The first time you use an acronym (e.g., ILM, RAG, MTTR, SIEM), you MUST define it in parentheses. Example: "We use ILM (Index Lifecycle Management) to..."
2. **FORMATTING**:
   - Use **Bold** for key terms.
   - Use `inline code` for tech terms like node types, config settings, or API calls.
   - Use > Blockquotes for "David's Tips".
3. **VISUALS**: Use ASCII art diagrams or code blocks to visualize concepts (e.g., `[Node] <-> [Node]`).
4. **ANALOGIES**: Always use the Airport (Cluster), Book (Index), and Microwave (Beats) analogies.
5. **RESOURCES**: For every major concept, provide a "Resources" list with markdown links:
   - [Google: Topic Name](https://www.google.com/search?q=elastic+topic)
   - [YouTube: Video Title](https://www.youtube.com/results?search_query=elastic+topic)
6. **PERSONA**: Be "Brutally Direct" but supportive. Tell them what gets them rejected vs what gets them hired.
7. **DAVID'S TIP**: In every response, include one random "David Castillo Tip" formatted as a blockquote (start line with >). Pick one that fits the context if possible, or a general wisdom one.
   - Example Tips:
     "{_TIPS_QUOTED}"

CORE KNOWLEDGE BASE:
{CORE_KNOWLEDGE_BASE}
"""

ARCHITECTURE_SYSTEM_INSTRUCTION = f"""
You are a Senior Elastic Solutions Architect.
Your task is to design a cluster architecture based on a user scenario.

OUTPUT FORMAT: JSON only (as defined in schema).

DESIGN RULES:
1. SIZING: Shards 20-50GB. Heap < 32GB.
2. TIERS: Always use Hot/Warm/Cold for logs/metrics to save cost.
3. NODES: Separate Master nodes if > 3 data nodes.
4. INGEST: Recommend Logstash if parsing is complex, Beats if simple.

CORE KNOWLEDGE BASE:
{CORE_KNOWLEDGE_BASE}
"""

TUTOR_SUGGESTIONS: tuple[str, ...] = (
    "Explain Sharding vs Replication",
    "Draw a Cluster Diagram",
    "How does BM25 work?",
    "Why use Logstash over Beats?",
)

# (kind, level, blurb) for each mock-interview track
INTERVIEW_TRACKS: tuple[tuple[str, str, str], ...] = (
    (
        "Technical Deep Dive",
        "Senior",
        "Brutal questions on sharding strategies, ILM (Index Lifecycle Management) policies, "
        "heap sizing, and performance bottlenecks.",
    ),
    (
        "Sales Discovery",
        "Manager",
        "Focus on business value, ROI, displacing competitors, and handling objections from CTOs.",
    ),
)


def get_module(module_id: str) -> ModuleDefinition | None:
    """Look up a learning-path module by id."""
    for module in ELASTIC_MODULES:
        if module.id == module_id:
            return module
    return None
