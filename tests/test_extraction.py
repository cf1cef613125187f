import pytest
from Bio import SeqIO
from pickident.core.exceptions import FormatError
from pickident.core.models import ContigRecord
from pickident.core.extraction import ContigFileWriter, extract_contig_fastas

from conftest import write

def record_ids(path):
    return [r.id for r in SeqIO.parse(str(path), "fasta")]

@pytest.fixture
def index():
    contig = ContigRecord(contig_id=42, description="Drosophila", length=300, percent_identity=100,
                          read_count=15, read_ids=["read1", "read2"])
    return {42: contig}

def test_reads_pass_appends_only_member_reads(index, reads_fasta, output_dir):
    # reads.fas holds read1, read3, read2; only read1 and read2 belong to Contig42
    stats = extract_contig_fastas(index, [42], output_dir, reads_path=reads_fasta)

    assert stats.reads_scanned == 3
    assert stats.reads_matched == 2
    assert stats.files_written == ["Contig42.fas"]
    assert record_ids(output_dir / "Contig42.fas") == ["read1", "read2"]
    assert sorted(p.name for p in output_dir.glob("Contig*")) == ["Contig42.fas"]

def test_reads_then_contig(index, reads_fasta, contigs_fasta, output_dir):
    stats = extract_contig_fastas(index, [42], output_dir, reads_path=reads_fasta, contigs_path=contigs_fasta)

    assert stats.contigs_matched == 1
    assert record_ids(output_dir / "Contig42.fas") == ["read1", "read2", "Contig42"]

def test_contig_pass_stops_when_all_found(tmp_path, output_dir):
    contigs = write(tmp_path / "contigs.fas", ">Contig1\nAAAA\n>Contig2\nCCCC\n>Contig1\nGGGG\n>Contig3\nTTTT\n")
    index = {
        cid: ContigRecord(contig_id=cid, description="", length=4, percent_identity=100, read_count=20)
        for cid in (1, 2)
    }

    stats = extract_contig_fastas(index, [2, 1], output_dir, contigs_path=contigs)

    assert stats.contigs_scanned == 2
    assert stats.contigs_matched == 2
    assert record_ids(output_dir / "Contig1.fas") == ["Contig1"]
    assert str(next(SeqIO.parse(str(output_dir / "Contig1.fas"), "fasta")).seq) == "AAAA"
    assert record_ids(output_dir / "Contig2.fas") == ["Contig2"]

def test_existing_file_is_backed_up(index, reads_fasta, output_dir):
    old = write(output_dir / "Contig42.fas", ">old\nNNNN\n")

    extract_contig_fastas(index, [42], output_dir, reads_path=reads_fasta)

    assert (output_dir / "Contig42.fas.bak").read_text(encoding="utf-8") == ">old\nNNNN\n"
    assert record_ids(old) == ["read1", "read2"]

def test_no_overwrite_appends(index, reads_fasta, output_dir):
    write(output_dir / "Contig42.fas", ">old\nNNNN\n")

    extract_contig_fastas(index, [42], output_dir, reads_path=reads_fasta, no_overwrite=True)

    assert not (output_dir / "Contig42.fas.bak").exists()
    assert record_ids(output_dir / "Contig42.fas") == ["old", "read1", "read2"]

def test_no_relevant_contigs_creates_nothing(index, reads_fasta, contigs_fasta, output_dir):
    stats = extract_contig_fastas(index, [], output_dir, reads_path=reads_fasta, contigs_path=contigs_fasta)

    assert stats.reads_scanned == 0
    assert stats.files_written == []
    assert list(output_dir.glob("Contig*.fas")) == []

def test_no_inputs_is_a_no_op(index, output_dir):
    stats = extract_contig_fastas(index, [42], output_dir)
    assert stats.files_written == []
    assert list(output_dir.iterdir()) == []

def test_invalid_reads_file(index, tmp_path, output_dir):
    bad = write(tmp_path / "reads.txt", "read1 ACGT\n")
    with pytest.raises(FormatError):
        extract_contig_fastas(index, [42], output_dir, reads_path=bad)

def test_writer_opens_each_file_once(tmp_path, reads_fasta):
    records = list(SeqIO.parse(str(reads_fasta), "fasta"))
    with ContigFileWriter(tmp_path) as writer:
        writer.write(5, records[0])
        writer.write(5, records[1])
        writer.write(6, records[2])
        assert [p.name for p in writer.paths] == ["Contig5.fas", "Contig6.fas"]

    assert record_ids(tmp_path / "Contig5.fas") == ["read1", "read3"]
    assert not (tmp_path / "Contig5.fas.bak").exists()

def test_repeated_read_does_not_hide_missing_read(index, tmp_path, output_dir):
    # read1 twice, read2 absent
    reads = write(tmp_path / "reads.fas", ">read1\nACGT\n>read1\nACGT\n>read9\nTTTT\n")

    stats = extract_contig_fastas(index, [42], output_dir, reads_path=reads)

    assert stats.reads_matched == 2
    assert stats.reads_missing == 1

def test_all_reads_found(index, reads_fasta, output_dir):
    stats = extract_contig_fastas(index, [42], output_dir, reads_path=reads_fasta)
    assert stats.reads_missing == 0
