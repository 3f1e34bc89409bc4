"""Design document.

Abstractions related to image content:

Frame - Represents a single decoded image: a read-only numpy array of
        shape (height, width, channels) holding RGB or RGBA bytes,
        plus its provenance (source urn, original format, history).

        Frames are immutable when they move through a stage; an
        operation such as resize() creates a new Frame and appends
        to the history of the new one.

Frame Record - The line-delimited JSON-LD object that carries a Frame
        from one process to the next. Exactly one record per line.
        See frame.encode_record() and frame.decode_record().

Abstractions related to image processing:

Stage - the nodes of the pipeline. They have inputs and outputs.
        Frames are passed from a stage to the stages connected to it.

Sources - Functions and generators that produce Frames: a single
        Frame from a file, URL or stdin (FrameFromSource), or a stream
        of Frames parsed from Frame Records (FrameRecordStream).

        TeeLines wraps an input stream and copies every line to an
        output stream once the line has been consumed. This is the
        --union mode of the viewer and writer.

Pipeline - Holds all of the stages and moves the frames between them.

Programs:

imagepipe-reader - source -> one Frame Record on stdout
imagepipe-viewer - Frame Records on stdin -> window
imagepipe-writer - Frame Records on stdin -> one or more image files

"""

__version__ = '0.1.0'
