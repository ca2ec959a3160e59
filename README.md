# kmapkit

Pure-Python building blocks for mapping DNA sequences against a reference.

## What is inside

- `kmapkit.fastx`: a streaming FASTA/FASTQ reader. `FastxReader` takes a binary
  stream and yields `FastxRecord` objects (`name`, `comment`, `sequence` and
  `quality`, which is None for FASTA). It can be used as a context manager.
  `open_fastx` opens a plain or gzip-compressed file, or standard input for
  `None` or `"-"`. A FASTQ record whose quality string is missing or does not
  match its sequence length raises `TruncatedQualityError`.
- `kmapkit.rmq`: `RMQTree`, an AVL tree ordered by a `key` function that keeps
  subtree sizes and subtree minima of a `value` function. It offers `insert`,
  `find`, `interval`, `erase`, `erase_first`, in-order iteration (forwards,
  `reversed()` and `iter_from`) and range-minimum queries over a closed key
  interval with `rmq(lo, hi)`. Items with equal keys count as the same item.
- `kmapkit.sorting`: `ksmall` (k-th smallest by quickselect, reordering in
  place), `heap_make` (builds a max-heap in place) and `radix_sort` (an in-place
  byte-wise radix sort on an unsigned integer key of `key_bytes` bytes).
- `kmapkit.records`: mapping option bits (`MapFlag`), index bits (`IndexFlag`),
  CIGAR operators (`CigarOp`, `cigar_string` for BAM-encoded operations), the
  alignment record `Region` and the user-facing `Hit`, built with
  `Hit.from_region(region, ctg_name, ctg_len)`.
- `kmapkit.seqpack`: 4-bit packed sequence access (`seq4_set`, `seq4_get`) and
  the fast single-precision approximate `mg_log2` (meant for inputs of at least 2).
- `kmapkit.ksw`: alignment flags (`KswFlag`), the result of an extension
  (`ExtzResult`), CIGAR building (`push_cigar`), traceback through a direction
  matrix (`backtrack`) and Z-drop handling (`apply_zdrop`).
- `kmapkit.exts2`: spliced extension alignment with a long-gap (intron) state
  (`exts2`) and donor/acceptor site scoring for 0/1/2/3-encoded targets
  (`splice_scores`).

## Installing

```
pip install .
pip install ".[test]"   # to run the tests
```

## Examples

Reading sequences:

```python
from kmapkit.fastx import open_fastx

with open_fastx("reads.fq.gz") as reader:
    for record in reader:
        print(record.name, len(record.sequence))
```

Range-minimum queries:

```python
from kmapkit.rmq import RMQTree

tree = RMQTree(key=lambda p: p[0], value=lambda p: p[1])
for item in [(1, 9), (4, 2), (7, 5), (9, 1)]:
    tree.insert(item)
print(tree.rmq((2, 0), (8, 0)))   # (4, 2): smallest value with key in [2, 8]
```

Spliced alignment of 0/1/2/3-encoded sequences (code 4 is the wildcard):

```python
from kmapkit.exts2 import exts2
from kmapkit.ksw import KswFlag
from kmapkit.records import cigar_string

mat = [2, -4, -4, -4, 0,
       -4, 2, -4, -4, 0,
       -4, -4, 2, -4, 0,
       -4, -4, -4, 2, 0,
       0, 0, 0, 0, 0]
query = [0, 1, 2, 3, 0, 1]
target = [0, 1, 2, 3, 0, 1]
ez = exts2(query, target, 5, mat, 2, 1, 32, 9, 400, 0, KswFlag.SPLICE_FOR, None)
print(ez.score, cigar_string(ez.cigar))
```

## What it does not do

kmapkit has no command-line program, builds no minimizer index and does not map
reads end to end: there is no seeding, chaining, index file reading or writing,
and no SAM or PAF output. It provides the pieces listed above for use from
Python code.

## Running the tests

```
pytest
```