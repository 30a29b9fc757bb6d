#!/usr/bin/env python
import argparse
import sys

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

import bwa_utilities
from bwa_utilities import CommandResult


class _BwaOptions(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    output: StrictStr = ''
    bwa: StrictStr = 'bwa'

    @field_validator('bwa')
    @classmethod
    def bwa_not_empty(cls, v):
        return bwa_utilities.require_text(v)


class AlnOptions(_BwaOptions):
    fastq: StrictStr
    index: StrictStr
    threads: int = Field(default=4, gt=0, strict=True)

    @field_validator('fastq', 'index')
    @classmethod
    def not_empty(cls, v):
        return bwa_utilities.require_text(v)


class SamseOptions(_BwaOptions):
    fastq: StrictStr
    aln: StrictStr
    index: StrictStr

    @field_validator('fastq', 'aln', 'index')
    @classmethod
    def not_empty(cls, v):
        return bwa_utilities.require_text(v)


class SampeOptions(_BwaOptions):
    fastq1: StrictStr
    fastq2: StrictStr
    aln1: StrictStr
    aln2: StrictStr
    index: StrictStr

    @field_validator('fastq1', 'fastq2', 'aln1', 'aln2', 'index')
    @classmethod
    def not_empty(cls, v):
        return bwa_utilities.require_text(v)


def aln(fastq=None, index=None, threads=4, output='', bwa='bwa'):
    """
    Build the ``bwa aln`` command aligning a FASTQ file against a BWA index.

    Args:
        fastq: FASTQ file to align to the reference genome
        index: prefix of the BWA index files
        threads: number of threads for bwa aln (default: 4)
        output: name of the .sai file; derived from the FASTQ name when empty
        bwa: bwa executable (default: bwa)

    Returns:
        CommandResult with the command to run and the .sai file it writes
    """
    opts = bwa_utilities.build_options(AlnOptions, fastq=fastq, index=index, threads=threads,
                                        output=output, bwa=bwa)

    output = opts.output
    if output == '':
        output = bwa_utilities.basename_without_suffix(opts.fastq, bwa_utilities.ALN_FASTQ_SUFFIXES) + '.sai'

    cmd = ' '.join([opts.bwa, 'aln',
                    '-t', str(opts.threads),
                    '-f', output,
                    opts.index,
                    opts.fastq])
    return CommandResult(command=cmd, output_path=output)


def samse(fastq=None, aln=None, index=None, output='', bwa='bwa'):
    """
    Build the ``bwa samse`` command producing a SAM file for single-end data.

    Args:
        fastq: FASTQ file
        aln: output of the bwa aln command for ``fastq``
        index: prefix of the BWA index files
        output: name of the SAM file; derived from the FASTQ name when empty
        bwa: bwa executable (default: bwa)
    """
    opts = bwa_utilities.build_options(SamseOptions, fastq=fastq, aln=aln, index=index,
                                        output=output, bwa=bwa)

    output = opts.output
    if output == '':
        output = bwa_utilities.basename_without_suffix(opts.fastq, bwa_utilities.SAM_FASTQ_SUFFIXES) + '.sam'

    cmd = ' '.join([opts.bwa, 'samse',
                    '-f', output,
                    opts.index,
                    opts.aln,
                    opts.fastq])
    return CommandResult(command=cmd, output_path=output)


def sampe(fastq1=None, fastq2=None, aln1=None, aln2=None, index=None, output='', bwa='bwa'):
    """
    Build the ``bwa sampe`` command producing a SAM file for paired-end data.

    The default output name is derived from the read 1 FASTQ file.
    """
    opts = bwa_utilities.build_options(SampeOptions, fastq1=fastq1, fastq2=fastq2, aln1=aln1, aln2=aln2,
                                        index=index, output=output, bwa=bwa)

    output = opts.output
    if output == '':
        output = bwa_utilities.basename_without_suffix(opts.fastq1, bwa_utilities.SAM_FASTQ_SUFFIXES) + '.sam'

    cmd = ' '.join([opts.bwa, 'sampe',
                    '-f', output,
                    opts.index,
                    opts.aln1,
                    opts.aln2,
                    opts.fastq1,
                    opts.fastq2])
    return CommandResult(command=cmd, output_path=output)


def print_configuration(args):
    """Print configuration summary."""
    print('Alignment step       : ' + args.step, file=sys.stderr)
    print('BWA index            : ' + args.index, file=sys.stderr)
    print('BWA executable       : ' + args.bwa, file=sys.stderr)
    if args.step == 'aln':
        print('Threads              : ' + str(args.threads), file=sys.stderr)
    print('Output               : ' + (args.output if args.output else 'derived from FASTQ name'), file=sys.stderr)
    print("===================================================================", file=sys.stderr)


def build_command(args):
    """Dispatch parsed arguments to the matching builder."""
    common = {'index': args.index, 'output': args.output, 'bwa': args.bwa}
    if args.step == 'aln':
        return aln(fastq=args.fastq, threads=args.threads, **common)
    if args.step == 'samse':
        return samse(fastq=args.fastq, aln=args.aln, **common)
    return sampe(fastq1=args.fastq1, fastq2=args.fastq2, aln1=args.aln1, aln2=args.aln2, **common)


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='bwatools: build bwa aln/samse/sampe commands',
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {bwa_utilities.__version__}')

    # options shared by every step
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-x', '--index', action='store', dest='index', required=True, metavar='',
                        help='Prefix of the BWA index files')
    common.add_argument('-o', '--output', action='store', dest='output', default='', metavar='',
                        help='Output file; derived from the (read 1) FASTQ name if not given')
    common.add_argument('--bwa', action='store', dest='bwa', default='bwa', metavar='',
                        help='bwa executable to use')

    steps = parser.add_subparsers(dest='step', required=True, metavar='step')

    p_aln = steps.add_parser('aln', parents=[common], help='Find SA coordinates of the reads',
                             formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p_aln.add_argument('-i', '--fastq', action='store', dest='fastq', required=True, metavar='',
                       help='FASTQ file to align')
    p_aln.add_argument('-t', '--threads', action='store', type=int, default=4, metavar='',
                       dest='threads', help='Number of threads')

    p_samse = steps.add_parser('samse', parents=[common], help='Generate SAM output for single-end reads',
                               formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p_samse.add_argument('-i', '--fastq', action='store', dest='fastq', required=True, metavar='',
                         help='FASTQ file')
    p_samse.add_argument('-a', '--aln', action='store', dest='aln', required=True, metavar='',
                         help='.sai file produced by bwa aln')

    p_sampe = steps.add_parser('sampe', parents=[common], help='Generate SAM output for paired-end reads',
                               formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    p_sampe.add_argument('-1', '--fastq1', action='store', dest='fastq1', required=True, metavar='',
                         help='FASTQ file for read 1')
    p_sampe.add_argument('-2', '--fastq2', action='store', dest='fastq2', required=True, metavar='',
                         help='FASTQ file for read 2')
    p_sampe.add_argument('-a1', '--aln1', action='store', dest='aln1', required=True, metavar='',
                         help='.sai file for read 1')
    p_sampe.add_argument('-a2', '--aln2', action='store', dest='aln2', required=True, metavar='',
                         help='.sai file for read 2')

    return parser.parse_args(argv)


def main(argv=None):
    """Print the requested bwa command on stdout."""
    args = parse_arguments(argv)
    print_configuration(args)
    try:
        result = build_command(args)
    except bwa_utilities.ValidationError as e:
        sys.stderr.write(str(e) + "\n")
        sys.exit(1)
    bwa_utilities.print_w_time("Expected output: " + result.output_path)
    print(result.command)


if __name__ == "__main__":
    main()
