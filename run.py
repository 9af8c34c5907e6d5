# run.py
from __future__ import annotations
import sys
from pathlib import Path
import logging
import argparse

sys.path.append(str(Path(__file__).parent / "src"))
from importlib import import_module
pdf_main = import_module("pdf_table_extractor.main")
pdf_to_file = pdf_main.pdf_to_file

log = logging.getLogger(__name__)

def main() -> None:
    parser = argparse.ArgumentParser(description="Extraer tablas de documentos PDF a texto delimitado.")
    parser.add_argument("input_file", type=str, help="Ruta al archivo .pdf de entrada")
    parser.add_argument("-d", "--delimiter", type=str, default=",",
                        help="Delimitador de columnas (default: ',')")
    parser.add_argument("-o", "--output", type=str,
                        help="Archivo de salida; si se omite se imprime por STDOUT")
    parser.add_argument("--loglevel", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nivel de verbosidad del log (default: INFO)")

    args = parser.parse_args()
    logging.basicConfig(level=args.loglevel, format='%(asctime)s - %(levelname)s - %(message)s')

    if Path(args.input_file).suffix.lower() != ".pdf":
        log.error("Solo se admiten archivos PDF: %s", args.input_file)
        return

    log.info("PDF: %s", args.input_file)
    try:
        text = pdf_to_file(args.input_file, args.output, delimiter=args.delimiter or ",")
        if not args.output:
            print(text)
        log.info("✔ Proceso completado.")
    except FileNotFoundError:
        log.error("Error: No se encontró el archivo de entrada: %s", args.input_file)
    except Exception as e:
        log.error(f"Ocurrió un error inesperado: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    main()
