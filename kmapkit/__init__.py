"""Building blocks for mapping DNA sequences: FASTA/FASTQ reading, range-minimum trees, sorting, records and spliced alignment."""

__version__ = "0.1.0"
__all__ = ["exts2", "fastx", "ksw", "records", "rmq", "seqpack", "sorting"]