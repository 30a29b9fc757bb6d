#!/usr/bin/env python
import argparse
import os
import re
import sys

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

import bwa_utilities
from bwa_utilities import CommandResult

# a FASTQ record spans 4 lines
LINES_PER_READ = 4
DEFAULT_READS_PER_CHUNK = 10000000

_GZ_PREFIX_PATTERN = re.compile(r'\.gz\.?$')


class SplitFastqOptions(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    fastq: StrictStr
    number_of_reads: int = Field(default=DEFAULT_READS_PER_CHUNK, gt=0, strict=True)
    prefix: StrictStr = ''
    numeric_suffix: bool = True
    is_gzipped: bool = False
    split_bin: StrictStr = 'split'
    zcat_bin: StrictStr = 'zcat'
    output_directory: StrictStr = '.'

    @field_validator('fastq', 'split_bin', 'zcat_bin', 'output_directory')
    @classmethod
    def not_empty(cls, v):
        return bwa_utilities.require_text(v)

    @field_validator('prefix')
    @classmethod
    def prefix_not_blank(cls, v):
        return bwa_utilities.optional_text(v)

    @field_validator('numeric_suffix', 'is_gzipped', mode='before')
    @classmethod
    def flag(cls, v):
        return bwa_utilities.parse_flag(v)


class PairedSplitOptions(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    fastq1: StrictStr
    fastq2: StrictStr
    number_of_reads: int = Field(default=DEFAULT_READS_PER_CHUNK, gt=0, strict=True)
    read1_prefix: StrictStr = ''
    read2_prefix: StrictStr = ''
    numeric_suffix: bool = True
    split_bin: StrictStr = 'split'
    zcat_bin: StrictStr = 'zcat'
    output_directory: StrictStr = '.'

    @field_validator('fastq1', 'fastq2', 'split_bin', 'zcat_bin', 'output_directory')
    @classmethod
    def not_empty(cls, v):
        return bwa_utilities.require_text(v)

    @field_validator('read1_prefix', 'read2_prefix')
    @classmethod
    def prefix_not_blank(cls, v):
        return bwa_utilities.optional_text(v)

    @field_validator('numeric_suffix', mode='before')
    @classmethod
    def flag(cls, v):
        return bwa_utilities.parse_flag(v)


class PairedSplitResult(BaseModel):
    """Split commands for both mates of a paired-end run."""
    model_config = ConfigDict(frozen=True)

    read1: CommandResult
    read2: CommandResult
    read1_gzipped: bool
    read2_gzipped: bool


def is_gzipped_fastq(path):
    """Return True when ``path`` has a .gz suffix."""
    return path.endswith('.gz')


def chunk_prefix_for(fastq, prefix, is_gzipped, output_directory):
    """
    Work out the prefix the chunk files of ``fastq`` are written with.

    A relative prefix is placed under ``output_directory`` unless that is
    the current directory. For gzipped input a trailing .gz is replaced by ".".
    """
    chunk_prefix = prefix if prefix else os.path.basename(fastq) + '.'
    if output_directory != os.curdir and not os.path.isabs(chunk_prefix):
        chunk_prefix = os.path.join(output_directory, chunk_prefix)
    if is_gzipped:
        chunk_prefix = _GZ_PREFIX_PATTERN.sub('.', chunk_prefix)
    return chunk_prefix


def split_fastq(fastq=None, number_of_reads=DEFAULT_READS_PER_CHUNK, prefix='', numeric_suffix=True,
                is_gzipped=False, split_bin='split', zcat_bin='zcat', output_directory='.'):
    """
    Build the command splitting a FASTQ file into chunks of ``number_of_reads`` reads.

    The output directory is created if it does not exist; this is the only
    side effect. Nothing is executed.

    Args:
        fastq: FASTQ file to be split
        number_of_reads: number of reads per chunk (default: 10,000,000)
        prefix: prefix for the chunk files; base name of ``fastq`` plus "." when empty
        numeric_suffix: use numeric rather than alphabetic chunk suffixes
        is_gzipped: decompress ``fastq`` through zcat before splitting
        split_bin: split program; use gsplit on macOS
        zcat_bin: zcat program; use gzcat on macOS
        output_directory: directory for the chunk files

    Returns:
        CommandResult whose output_path is the chunk file prefix

    Raises:
        ValidationError: invalid arguments
        FilesystemError: output directory cannot be created
    """
    opts = bwa_utilities.build_options(SplitFastqOptions, fastq=fastq, number_of_reads=number_of_reads,
                                       prefix=prefix, numeric_suffix=numeric_suffix, is_gzipped=is_gzipped,
                                       split_bin=split_bin, zcat_bin=zcat_bin,
                                       output_directory=output_directory)

    bwa_utilities.ensure_directory(opts.output_directory)

    chunk_prefix = chunk_prefix_for(opts.fastq, opts.prefix, opts.is_gzipped, opts.output_directory)

    options = ['-l', str(opts.number_of_reads * LINES_PER_READ)]
    if opts.numeric_suffix:
        options.append('-d')

    if opts.is_gzipped:
        cmd = ' '.join([opts.zcat_bin, opts.fastq, '|', opts.split_bin] + options + ['-', chunk_prefix])
    else:
        cmd = ' '.join([opts.split_bin] + options + [opts.fastq, chunk_prefix])

    return CommandResult(command=cmd, output_path=chunk_prefix)


def split_paired_end_fastq_files(fastq1=None, fastq2=None, number_of_reads=DEFAULT_READS_PER_CHUNK,
                                 read1_prefix='', read2_prefix='', numeric_suffix=True,
                                 split_bin='split', zcat_bin='zcat', output_directory='.'):
    """
    Build split commands for a pair of read 1 / read 2 FASTQ files.

    Each mate is checked for a .gz suffix on its own and split with the
    matching command. Both files are assumed to hold the same reads in the
    same order. Matching the resulting chunk files into read pairs is left
    to the caller.
    """
    opts = bwa_utilities.build_options(PairedSplitOptions, fastq1=fastq1, fastq2=fastq2,
                                       number_of_reads=number_of_reads, read1_prefix=read1_prefix,
                                       read2_prefix=read2_prefix, numeric_suffix=numeric_suffix,
                                       split_bin=split_bin, zcat_bin=zcat_bin,
                                       output_directory=output_directory)

    read1_gzipped = is_gzipped_fastq(opts.fastq1)
    read2_gzipped = is_gzipped_fastq(opts.fastq2)

    # checked before split_fastq creates the output directory
    read1_chunks = chunk_prefix_for(opts.fastq1, opts.read1_prefix, read1_gzipped, opts.output_directory)
    read2_chunks = chunk_prefix_for(opts.fastq2, opts.read2_prefix, read2_gzipped, opts.output_directory)
    if read1_chunks == read2_chunks:
        raise bwa_utilities.ValidationError(
            "read 1 and read 2 would share the chunk prefix " + read1_chunks
            + "; pass distinct read1_prefix and read2_prefix")

    shared = {
        'number_of_reads': opts.number_of_reads,
        'numeric_suffix': opts.numeric_suffix,
        'split_bin': opts.split_bin,
        'zcat_bin': opts.zcat_bin,
        'output_directory': opts.output_directory,
    }
    read1 = split_fastq(fastq=opts.fastq1, prefix=opts.read1_prefix, is_gzipped=read1_gzipped, **shared)
    read2 = split_fastq(fastq=opts.fastq2, prefix=opts.read2_prefix, is_gzipped=read2_gzipped, **shared)

    return PairedSplitResult(read1=read1, read2=read2,
                             read1_gzipped=read1_gzipped, read2_gzipped=read2_gzipped)


def print_configuration(args):
    """Print configuration summary."""
    if args.mode == 'single':
        print('Input FASTQ          : ' + args.fastq, file=sys.stderr)
    else:
        print('Read 1 FASTQ         : ' + args.fastq1, file=sys.stderr)
        print('Read 2 FASTQ         : ' + args.fastq2, file=sys.stderr)
    print('Reads per chunk      : ' + str(args.number_of_reads), file=sys.stderr)
    print('Numeric suffixes     : ' + str(args.numeric_suffix), file=sys.stderr)
    print('Output directory     : ' + args.output_directory, file=sys.stderr)
    print("===================================================================", file=sys.stderr)


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='bwatools: build commands splitting FASTQ files into chunks',
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {bwa_utilities.__version__}')

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-n', '--number_of_reads', action='store', type=int, default=DEFAULT_READS_PER_CHUNK,
                        metavar='', dest='number_of_reads', help='Number of reads per chunk')
    common.add_argument('--numeric_suffix', action='store', type=bwa_utilities.parse_flag, default=True,
                        metavar='', dest='numeric_suffix',
                        help='Use numeric (true) or alphabetic (false) suffixes for chunk files')
    common.add_argument('--split', action='store', dest='split_bin', default='split', metavar='',
                        help='split program; use gsplit on macOS')
    common.add_argument('--zcat', action='store', dest='zcat_bin', default='zcat', metavar='',
                        help='zcat program; use gzcat on macOS')
    common.add_argument('-o', '--output_directory', action='store', dest='output_directory', default='.',
                        metavar='', help='Directory for the chunk files, created if missing')

    modes = parser.add_subparsers(dest='mode', required=True, metavar='mode')

    p_single = modes.add_parser('single', parents=[common], help='Split one FASTQ file',
                                formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p_single.add_argument('-i', '--fastq', action='store', dest='fastq', required=True, metavar='',
                          help='FASTQ file to split')
    p_single.add_argument('-p', '--prefix', action='store', dest='prefix', default='', metavar='',
                          help='Prefix of the chunk files; input file name plus "." if not given')
    p_single.add_argument('-z', '--gzipped', action='store', type=bwa_utilities.parse_flag, default=None,
                          metavar='', dest='is_gzipped',
                          help='Input is gzip compressed (true/false); guessed from the .gz suffix if not given')

    p_paired = modes.add_parser('paired', parents=[common], help='Split read 1 and read 2 FASTQ files',
                                formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p_paired.add_argument('-1', '--fastq1', action='store', dest='fastq1', required=True, metavar='',
                          help='FASTQ file for read 1')
    p_paired.add_argument('-2', '--fastq2', action='store', dest='fastq2', required=True, metavar='',
                          help='FASTQ file for read 2')
    p_paired.add_argument('-p1', '--prefix1', action='store', dest='read1_prefix', default='', metavar='',
                          help='Prefix of the read 1 chunk files')
    p_paired.add_argument('-p2', '--prefix2', action='store', dest='read2_prefix', default='', metavar='',
                          help='Prefix of the read 2 chunk files')

    return parser.parse_args(argv)


def build_commands(args):
    """Return the CommandResults requested on the command line."""
    shared = {
        'number_of_reads': args.number_of_reads,
        'numeric_suffix': args.numeric_suffix,
        'split_bin': args.split_bin,
        'zcat_bin': args.zcat_bin,
        'output_directory': args.output_directory,
    }
    if args.mode == 'single':
        is_gzipped = args.is_gzipped
        if is_gzipped is None:
            is_gzipped = is_gzipped_fastq(args.fastq)
        return [split_fastq(fastq=args.fastq, prefix=args.prefix, is_gzipped=is_gzipped, **shared)]

    paired = split_paired_end_fastq_files(fastq1=args.fastq1, fastq2=args.fastq2,
                                          read1_prefix=args.read1_prefix, read2_prefix=args.read2_prefix,
                                          **shared)
    return [paired.read1, paired.read2]


def main(argv=None):
    """Print the split command(s) on stdout, one per line."""
    args = parse_arguments(argv)
    print_configuration(args)
    try:
        results = build_commands(args)
    except (bwa_utilities.ValidationError, bwa_utilities.FilesystemError) as e:
        sys.stderr.write(str(e) + "\n")
        sys.exit(1)
    for result in results:
        bwa_utilities.print_w_time("Chunk prefix: " + result.output_path)
        print(result.command)


if __name__ == "__main__":
    main()
