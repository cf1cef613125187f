from pathlib import Path
import pytest

BLAST_REPORT = """BLASTN 2.2.18 [Mar-02-2008]

Query= cluster_7
         (300 letters)

Database: contigs.fas
           3 sequences; 2,100 total letters

Sequences producing significant alignments:                      (bits) Value

contig00042|Drosophila melanogaster mito COI                      555   e-157
contig00043|Homo sapiens                                          500   e-140

>contig00042|Drosophila melanogaster mito COI
          Length = 1200

 Score =  555 bits (280), Expect = e-157
 Identities = 300/300 (100%)
 Strand = Plus / Plus

Query: 1    acgtacgtac 10
             ||||||||||
Sbjct: 1    acgtacgtac 10

 Score =  100 bits (50), Expect = 1e-20
 Identities = 50/60 (83%)
 Strand = Plus / Plus

>contig00043|Homo sapiens
          Length = 500

 Score =  500 bits (252), Expect = e-140
 Identities = 280/290 (96%)
 Strand = Plus / Plus

  Database: contigs.fas
"""

TRACE_LIST = """contig\t#reads\treads
42  15  read1, read2
"""

READS_FASTA = """>read1
ACGTACGTAC
>read3
TTTTTTTTTT
>read2
GGGGCCCCAA
"""

CONTIGS_FASTA = """>Contig41
AAAAAAAAAA
>Contig42
ACGTACGTACGGGGCCCCAA
"""

def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path

@pytest.fixture
def blast_report(tmp_path) -> Path:
    return write(tmp_path / "blast.txt", BLAST_REPORT)

@pytest.fixture
def trace_list(tmp_path) -> Path:
    return write(tmp_path / "trace.txt", TRACE_LIST)

@pytest.fixture
def reads_fasta(tmp_path) -> Path:
    return write(tmp_path / "reads.fas", READS_FASTA)

@pytest.fixture
def contigs_fasta(tmp_path) -> Path:
    return write(tmp_path / "contigs.fas", CONTIGS_FASTA)

@pytest.fixture
def output_dir(tmp_path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out
